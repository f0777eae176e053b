from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..config_store import RouterConnectionProfile
from .proxy import ProxyClient, ProxyResponse

WIREGUARD_PATH = "/rest/interface/wireguard"
PEERS_PATH = "/rest/interface/wireguard/peers"


@dataclass
class ListResult:
    ok: bool
    rows: List[Any] = field(default_factory=list)
    status: Optional[int] = None
    error: Optional[str] = None


@dataclass
class ActionResult:
    ok: bool
    status: Optional[int] = None
    error: Optional[str] = None
    data: Any = None

    @classmethod
    def from_response(cls, resp: ProxyResponse, ok: bool) -> "ActionResult":
        return cls(ok=ok, status=resp.status, error=resp.error, data=resp.data)


class RouterResourceClient:
    """One router REST sub-path reached through the proxy."""

    path: str = ""

    def __init__(self, proxy: ProxyClient):
        self.proxy = proxy

    def item_path(self, item_id: str) -> str:
        return f"{self.path}/{item_id}"

    def list(self, profile: RouterConnectionProfile) -> ListResult:
        raise NotImplementedError
