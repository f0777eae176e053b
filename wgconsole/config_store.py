import json
import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from .errors import IncompleteConfigError, NotConfiguredError, UnsupportedRouterError
from .models import SettingsKV
from .security import SecretBox

logger = logging.getLogger(__name__)

PROFILE_KEY = "routerConfig"
MIKROTIK = "mikrotik"


class RouterConnectionProfile(BaseModel):
    router_type: str = Field(default=MIKROTIK, alias="routerType")
    endpoint: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    use_https: bool = Field(default=False, alias="useHttps")

    class Config:
        populate_by_name = True

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_text(cls, v):
        # The settings form keeps the port as typed
        return "" if v is None else str(v)


class ConfigStore:
    """Persisted router connection profile.

    Every ``load()`` reads the stored copy; nothing is cached in memory.
    """

    def __init__(self, session_factory: Callable[[], Session], box: SecretBox):
        self._session_factory = session_factory
        self._box = box

    def load(self) -> Optional[RouterConnectionProfile]:
        db = self._session_factory()
        try:
            kv = db.get(SettingsKV, PROFILE_KEY)
            if kv is None or not kv.value:
                return None
            raw = json.loads(kv.value)
        except ValueError:
            logger.warning("stored router profile is not valid JSON, ignoring it")
            return None
        finally:
            db.close()
        if not isinstance(raw, dict):
            logger.warning("stored router profile has an unexpected shape, ignoring it")
            return None
        token = raw.pop("passwordEnc", "")
        password = self._box.decrypt(token)
        if password is None:
            logger.warning("stored router password could not be decrypted (secret key changed?)")
            password = ""
        raw["password"] = password
        return RouterConnectionProfile.model_validate(raw)

    def save(self, profile: RouterConnectionProfile) -> None:
        blob = profile.model_dump(by_alias=True, exclude={"password"})
        blob["passwordEnc"] = self._box.encrypt(profile.password)
        db = self._session_factory()
        try:
            kv = db.get(SettingsKV, PROFILE_KEY)
            if kv is None:
                db.add(SettingsKV(key=PROFILE_KEY, value=json.dumps(blob)))
            else:
                kv.value = json.dumps(blob)
            db.commit()
        finally:
            db.close()

    def clear(self) -> bool:
        db = self._session_factory()
        try:
            kv = db.get(SettingsKV, PROFILE_KEY)
            if kv is None:
                return False
            db.delete(kv)
            db.commit()
            return True
        finally:
            db.close()

    def require(self) -> RouterConnectionProfile:
        profile = self.load()
        if profile is None:
            raise NotConfiguredError()
        return profile


def require_complete(profile: RouterConnectionProfile) -> RouterConnectionProfile:
    if not profile.endpoint or not profile.user or not profile.password:
        raise IncompleteConfigError()
    return profile


def require_mikrotik(profile: RouterConnectionProfile) -> RouterConnectionProfile:
    if profile.router_type != MIKROTIK:
        raise UnsupportedRouterError(profile.router_type, MIKROTIK)
    return profile
