from typing import Callable, Union

from ..config_store import RouterConnectionProfile
from ..generators import generate_allowed_address, generate_public_key
from .client_base import ActionResult, ListResult, PEERS_PATH, RouterResourceClient, WIREGUARD_PATH
from .normalize import rows_or_empty


def next_disabled_flag(current: Union[str, bool, None]) -> str:
    """Inverse of a RouterOS ``disabled`` flag, as the router's string boolean."""
    if isinstance(current, str):
        is_disabled = current.strip().lower() in ("true", "yes")
    else:
        is_disabled = bool(current)
    return "false" if is_disabled else "true"


class InterfacesClient(RouterResourceClient):
    path = WIREGUARD_PATH

    def list(self, profile: RouterConnectionProfile) -> ListResult:
        resp = self.proxy.send(profile, self.path, "GET")
        # Reads on this path also require the device to have answered 200
        if resp.success and resp.status == 200:
            return ListResult(ok=True, rows=rows_or_empty(resp.data), status=resp.status)
        return ListResult(ok=False, status=resp.status, error=resp.error)

    def set_disabled(self, profile: RouterConnectionProfile, interface_id: str, disabled: str) -> ActionResult:
        resp = self.proxy.send(profile, self.item_path(interface_id), "PATCH", {"disabled": disabled})
        return ActionResult.from_response(resp, ok=resp.success)

    def delete(self, profile: RouterConnectionProfile, interface_id: str) -> ActionResult:
        resp = self.proxy.send(profile, self.item_path(interface_id), "DELETE")
        return ActionResult.from_response(resp, ok=resp.success and resp.status in (200, 204))


class PeersClient(RouterResourceClient):
    path = PEERS_PATH

    def __init__(
        self,
        proxy,
        key_factory: Callable[[], str] = generate_public_key,
        address_factory: Callable[[], str] = generate_allowed_address,
    ):
        super().__init__(proxy)
        self.key_factory = key_factory
        self.address_factory = address_factory

    def list(self, profile: RouterConnectionProfile) -> ListResult:
        resp = self.proxy.send(profile, self.path, "GET")
        # HTTP status is not inspected here, only the proxy's success flag
        if resp.success and resp.data is not None:
            return ListResult(ok=True, rows=rows_or_empty(resp.data), status=resp.status)
        return ListResult(ok=False, status=resp.status, error=resp.error)

    def build_peer(self, interface: str, endpoint_address: str) -> dict:
        return {
            "interface": interface,
            "public-key": self.key_factory(),
            "allowed-address": self.address_factory(),
            "endpoint-address": endpoint_address,
        }

    def create(self, profile: RouterConnectionProfile, interface: str, endpoint_address: str) -> ActionResult:
        resp = self.proxy.send(profile, self.path, "PUT", self.build_peer(interface, endpoint_address))
        return ActionResult.from_response(resp, ok=resp.success)
