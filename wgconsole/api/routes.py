import re
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, ValidationError
from typing import Any, Dict, List, Optional, Union

from ..config_store import RouterConnectionProfile
from ..console import Console, get_console
from ..controllers import Outcome
from ..errors import BackendApiError
from ..generators import config_filename, display_name, render_client_config, to_qr
from ..notifications import Notification
from ..settings import settings


router = APIRouter(prefix="/api/console", tags=["console"])


class NotificationDTO(BaseModel):
    title: str
    description: str
    variant: str

    @classmethod
    def of(cls, note: Notification) -> "NotificationDTO":
        return cls(title=note.title, description=note.description, variant=note.variant)


class ProfileDTO(BaseModel):
    router_type: str = Field(default="mikrotik", alias="routerType")
    endpoint: str
    port: Union[str, int] = ""
    user: str
    password: Optional[str] = None
    use_https: bool = Field(default=False, alias="useHttps")

    class Config:
        populate_by_name = True


class ProfileOutDTO(BaseModel):
    configured: bool
    routerType: Optional[str] = None
    endpoint: Optional[str] = None
    port: Optional[str] = None
    user: Optional[str] = None
    useHttps: Optional[bool] = None
    has_password: bool = False


class InterfacesViewDTO(BaseModel):
    interfaces: List[Any]
    is_loading: bool
    deleting_id: Optional[str] = None
    toggling_id: Optional[str] = None
    stats: Dict[str, int]
    notifications: List[NotificationDTO] = []


class InterfaceActionDTO(BaseModel):
    outcome: str
    interfaces: List[Any]
    notifications: List[NotificationDTO] = []


class PeersViewDTO(BaseModel):
    peers: List[Any]
    is_loading: bool
    is_creating: bool
    notifications: List[NotificationDTO] = []


class PeerCreateDTO(BaseModel):
    interface: str
    endpoint_address: str = Field(alias="endpoint-address")

    class Config:
        populate_by_name = True


class PeerCreatedDTO(BaseModel):
    ok: bool
    peers: List[Any]
    notifications: List[NotificationDTO] = []


class ApiLogDTO(BaseModel):
    method: str
    path: str
    status: Optional[int] = None
    duration_ms: int
    request_headers: Dict[str, str]
    response_headers: Dict[str, str]
    response_body: Optional[str] = None
    error: Optional[str] = None
    ts: str


def _profile_out(profile: Optional[RouterConnectionProfile]) -> ProfileOutDTO:
    if profile is None:
        return ProfileOutDTO(configured=False)
    return ProfileOutDTO(
        configured=True,
        routerType=profile.router_type,
        endpoint=profile.endpoint,
        port=profile.port,
        user=profile.user,
        useHttps=profile.use_https,
        has_password=bool(profile.password),
    )


def _notes(console: Console, mark: int) -> List[NotificationDTO]:
    return [NotificationDTO.of(n) for n in console.notifier.since(mark)]


@router.get("/profile", response_model=ProfileOutDTO)
def get_profile(console: Console = Depends(get_console)):
    return _profile_out(console.store.load())


@router.put("/profile", response_model=ProfileOutDTO)
def put_profile(dto: ProfileDTO, console: Console = Depends(get_console)):
    password = dto.password
    if password is None:
        # Keep the stored password when the form leaves it blank
        current = console.store.load()
        password = current.password if current else ""
    profile = RouterConnectionProfile(
        router_type=dto.router_type,
        endpoint=dto.endpoint,
        port=dto.port,
        user=dto.user,
        password=password,
        use_https=dto.use_https,
    )
    console.store.save(profile)
    return _profile_out(profile)


@router.delete("/profile")
def delete_profile(console: Console = Depends(get_console)):
    return {"ok": True, "deleted": console.store.clear()}


@router.post("/profile/import", response_model=ProfileOutDTO)
def import_profile(console: Console = Depends(get_console)):
    try:
        payload = console.backend.get_router_config()
    except BackendApiError as e:
        raise HTTPException(status_code=502, detail=f"backend request failed: {e}")
    except Exception as e:
        raise HTTPException(status_code=502, detail=f"backend connection failed: {e}")
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict) or not payload.get("endpoint"):
        raise HTTPException(status_code=404, detail="backend has no router configuration")
    try:
        profile = RouterConnectionProfile.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=502, detail=f"backend returned an invalid router configuration: {e.error_count()} error(s)")
    console.store.save(profile)
    return _profile_out(profile)


@router.get("/interfaces", response_model=InterfacesViewDTO)
def list_interfaces(console: Console = Depends(get_console)):
    ctl = console.interfaces
    mark = console.notifier.mark()
    ctl.fetch()
    return InterfacesViewDTO(
        interfaces=ctl.interfaces,
        is_loading=ctl.is_loading,
        deleting_id=ctl.deleting_id,
        toggling_id=ctl.toggling_id,
        stats=ctl.stats(),
        notifications=_notes(console, mark),
    )


@router.post("/interfaces/{interface_id}/toggle", response_model=InterfaceActionDTO)
def toggle_interface(interface_id: str, disabled: str, confirm: bool = False, console: Console = Depends(get_console)):
    mark = console.notifier.mark()
    outcome = console.interfaces.toggle(interface_id, disabled, confirmed=confirm)
    if outcome is Outcome.CANCELLED:
        raise HTTPException(status_code=409, detail="confirmation required")
    return InterfaceActionDTO(outcome=outcome.value, interfaces=console.interfaces.interfaces, notifications=_notes(console, mark))


@router.delete("/interfaces/{interface_id}", response_model=InterfaceActionDTO)
def delete_interface(interface_id: str, name: str = "", confirm: bool = False, console: Console = Depends(get_console)):
    mark = console.notifier.mark()
    outcome = console.interfaces.delete(interface_id, name, confirmed=confirm)
    if outcome is Outcome.CANCELLED:
        raise HTTPException(status_code=409, detail="confirmation required")
    return InterfaceActionDTO(outcome=outcome.value, interfaces=console.interfaces.interfaces, notifications=_notes(console, mark))


@router.get("/peers", response_model=PeersViewDTO)
def list_peers(console: Console = Depends(get_console)):
    ctl = console.peers
    mark = console.notifier.mark()
    ctl.fetch()
    return PeersViewDTO(
        peers=ctl.peers,
        is_loading=ctl.is_loading,
        is_creating=ctl.is_creating,
        notifications=_notes(console, mark),
    )


@router.post("/peers", response_model=PeerCreatedDTO)
def create_peer(dto: PeerCreateDTO, console: Console = Depends(get_console)):
    mark = console.notifier.mark()
    ok = console.peers.create(dto.interface, dto.endpoint_address)
    return PeerCreatedDTO(ok=ok, peers=console.peers.peers, notifications=_notes(console, mark))


def _lookup_peer(console: Console, peer_id: str) -> dict:
    peer = console.peers.find(peer_id)
    if peer is None:
        console.peers.fetch()
        peer = console.peers.find(peer_id)
    if peer is None:
        raise HTTPException(status_code=404, detail="peer not found")
    return peer


def _client_config(peer: dict) -> str:
    return render_client_config(
        peer,
        dns=settings.client_dns,
        default_address=settings.client_default_address,
        default_endpoint=settings.client_default_endpoint,
        default_port=settings.client_default_port,
    )


def _safe_header(value: str) -> str:
    return re.sub(r"[^\w.*-]", "_", value, flags=re.ASCII)


@router.get("/peers/{peer_id}/config")
def get_peer_config(peer_id: str, console: Console = Depends(get_console)):
    peer = _lookup_peer(console, peer_id)
    return PlainTextResponse(
        _client_config(peer),
        headers={
            "Content-Disposition": f'attachment; filename="{_safe_header(config_filename(peer))}"',
            "X-Peer-Name": _safe_header(display_name(peer)),
        },
    )


@router.get("/peers/{peer_id}/qrcode")
def get_peer_qrcode(peer_id: str, console: Console = Depends(get_console)):
    peer = _lookup_peer(console, peer_id)
    headers = {"X-Peer-Name": _safe_header(display_name(peer))}
    png = to_qr(_client_config(peer))
    if not png:
        # Nothing to show; the UI falls back to its placeholder icon
        return Response(status_code=204, headers=headers)
    return Response(content=png, media_type="image/png", headers=headers)


@router.get("/logs", response_model=List[ApiLogDTO])
def list_logs(console: Console = Depends(get_console)):
    return [ApiLogDTO(**e.to_dict()) for e in console.log_book.entries()]


@router.delete("/logs")
def clear_logs(console: Console = Depends(get_console)):
    console.log_book.clear()
    return {"ok": True}


@router.get("/notifications", response_model=List[NotificationDTO])
def list_notifications(console: Console = Depends(get_console)):
    return [NotificationDTO.of(n) for n in console.notifier.items()]


@router.delete("/notifications")
def clear_notifications(console: Console = Depends(get_console)):
    console.notifier.clear()
    return {"ok": True}
