"""Screen state for the interfaces and peers views.

Lists are only ever replaced by the rows of a successful fetch. Every
mutation that succeeds is followed by one full re-fetch; that refresh is a
separate call, so its failure does not undo the mutation's success message.
Overlapping actions are not coordinated and the last fetch to finish wins.
"""
import enum
import logging
from typing import List, Optional, Union

from .config_store import ConfigStore, MIKROTIK, require_complete, require_mikrotik
from .errors import IncompleteConfigError, NotConfiguredError, ProxyTransportError, UnsupportedRouterError
from .generators import peer_id
from .notifications import Notifier
from .routeros.resources import InterfacesClient, PeersClient, next_disabled_flag

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class InterfacesController:
    def __init__(self, store: ConfigStore, client: InterfacesClient, notifier: Notifier):
        self.store = store
        self.client = client
        self.notifier = notifier
        self.interfaces: List[dict] = []
        self.is_loading = True
        self.deleting_id: Optional[str] = None
        self.toggling_id: Optional[str] = None

    def fetch(self) -> bool:
        self.is_loading = True
        try:
            profile = self.store.load()
            if profile is None:
                self.notifier.error("Configuration not found", "Configure the router connection in Settings first.")
                return False
            try:
                require_complete(profile)
            except IncompleteConfigError:
                self.notifier.error("Incomplete configuration", "Check the router connection settings.")
                return False

            result = self.client.list(profile)
            if not result.ok:
                self.notifier.error("Error fetching interfaces", result.error or "Failed to connect to the router.")
                return False
            self.interfaces = result.rows
            if not result.rows:
                self.notifier.notify("No interfaces found", "No WireGuard interfaces are configured on the router.")
            return True
        except ProxyTransportError as e:
            logger.warning("interface fetch failed: %s", e)
            self.notifier.error("Connection error", "Could not reach the backend. Check that the service is running.")
            return False
        except Exception:
            logger.exception("interface fetch failed")
            self.notifier.error("Connection error", "Could not reach the backend. Check that the service is running.")
            return False
        finally:
            self.is_loading = False

    def toggle(self, interface_id: str, current_disabled: Union[str, bool, None], confirmed: bool = False) -> Outcome:
        if not confirmed:
            return Outcome.CANCELLED
        self.toggling_id = interface_id
        try:
            profile = self.store.load()
            if profile is None:
                self.notifier.error("Configuration not found", "Configure the router connection first.")
                return Outcome.FAILED
            disabled = next_disabled_flag(current_disabled)
            result = self.client.set_disabled(profile, interface_id, disabled)
            if not result.ok:
                self.notifier.error("Error updating interface", result.error or "Failed to update the interface.")
                return Outcome.FAILED
            verb = "disabled" if disabled == "true" else "enabled"
            self.notifier.notify("Interface updated", f"Interface {interface_id} was {verb}.")
        except Exception as e:
            logger.warning("interface toggle failed: %s", e)
            self.notifier.error("Connection error", "Could not reach the backend.")
            return Outcome.FAILED
        finally:
            self.toggling_id = None
        self.fetch()
        return Outcome.SUCCEEDED

    def delete(self, interface_id: str, name: str = "", confirmed: bool = False) -> Outcome:
        if not confirmed:
            return Outcome.CANCELLED
        label = name or interface_id
        self.deleting_id = interface_id
        try:
            profile = self.store.load()
            if profile is None:
                self.notifier.error("Configuration not found", "Configure the router connection first.")
                return Outcome.FAILED
            result = self.client.delete(profile, interface_id)
            if not result.ok:
                self.notifier.error("Error deleting interface", result.error or "Failed to delete the interface.")
                return Outcome.FAILED
            self.notifier.notify("Interface deleted", f"Interface {label} was deleted.")
        except Exception as e:
            logger.warning("interface delete failed: %s", e)
            self.notifier.error("Connection error", "Could not reach the backend.")
            return Outcome.FAILED
        finally:
            self.deleting_id = None
        self.fetch()
        return Outcome.SUCCEEDED

    def stats(self) -> dict:
        rows = [i for i in self.interfaces if isinstance(i, dict)]
        return {
            "total": len(self.interfaces),
            "running": sum(1 for i in rows if i.get("running") == "true"),
            "enabled": sum(1 for i in rows if i.get("disabled") == "false"),
        }


class PeersController:
    def __init__(self, store: ConfigStore, client: PeersClient, notifier: Notifier):
        self.store = store
        self.client = client
        self.notifier = notifier
        self.peers: List[dict] = []
        self.is_loading = False
        self.is_creating = False

    def fetch(self) -> bool:
        try:
            profile = self.store.require()
            if profile.router_type != MIKROTIK:
                logger.debug("router type is %r, skipping peer fetch", profile.router_type)
                return False

            self.is_loading = True
            result = self.client.list(profile)
            if not result.ok:
                self.notifier.error("Error loading peers", result.error or "Failed to communicate with the router.")
                return False
            self.peers = result.rows
            return True
        except NotConfiguredError:
            self.notifier.error("Configuration not found", "Configure the router connection first.")
            return False
        except Exception as e:
            logger.warning("peer fetch failed: %s", e)
            self.notifier.error("Connection error", "Could not fetch peers from the router.")
            return False
        finally:
            self.is_loading = False

    def create(self, interface: str, endpoint_address: str) -> bool:
        try:
            profile = require_mikrotik(self.store.require())
            self.is_creating = True
            result = self.client.create(profile, interface, endpoint_address)
            if not result.ok:
                self.notifier.error("Error creating peer", result.error or "Failed to communicate with the router.")
                return False
            self.notifier.notify("Peer created", "The WireGuard peer was configured on the router.")
        except NotConfiguredError:
            self.notifier.error("Configuration not found", "Configure the router connection first.")
            return False
        except UnsupportedRouterError:
            self.notifier.error("Unsupported router", "This feature is specific to Mikrotik routers.")
            return False
        except Exception as e:
            logger.warning("peer create failed: %s", e)
            self.notifier.error("Connection error", "Could not create the peer on the router.")
            return False
        finally:
            self.is_creating = False
        self.fetch()
        return True

    def find(self, pid: str) -> Optional[dict]:
        for peer in self.peers:
            if isinstance(peer, dict) and peer_id(peer) == pid:
                return peer
        return None
