from typing import Callable, Optional

from sqlalchemy.orm import Session

from .api_log import ApiLogBook
from .backend_api import BackendApiService
from .config_store import ConfigStore
from .controllers import InterfacesController, PeersController
from .db import SessionLocal
from .notifications import Notifier
from .routeros.factory import make_clients, make_proxy_client
from .security import SecretBox
from .settings import settings


class Console:
    """Process-wide wiring of the store, proxy client and screen controllers."""

    def __init__(self, store: ConfigStore, log_book: ApiLogBook, proxy, notifier: Notifier, backend: BackendApiService):
        self.store = store
        self.log_book = log_book
        self.proxy = proxy
        self.notifier = notifier
        self.backend = backend
        interfaces_client, peers_client = make_clients(proxy)
        self.interfaces = InterfacesController(store, interfaces_client, notifier)
        self.peers = PeersController(store, peers_client, notifier)


def build_console(
    session_factory: Callable[[], Session] = SessionLocal,
    transport=None,
    backend_transport=None,
) -> Console:
    log_book = ApiLogBook(settings.api_log_capacity)
    store = ConfigStore(session_factory, SecretBox(settings.secret_key))
    proxy = make_proxy_client(settings, log_book, transport=transport)
    backend = BackendApiService(settings.backend_api_url, timeout=settings.proxy_timeout_seconds, transport=backend_transport)
    return Console(store, log_book, proxy, Notifier(), backend)


_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = build_console()
    return _console
