from ..api_log import ApiLogBook
from ..settings import AppSettings
from .proxy import ProxyClient
from .resources import InterfacesClient, PeersClient


def make_proxy_client(settings: AppSettings, log_book: ApiLogBook, transport=None) -> ProxyClient:
    return ProxyClient(
        proxy_url=settings.proxy_url,
        timeout=settings.proxy_timeout_seconds,
        log_book=log_book,
        transport=transport,
    )


def make_clients(proxy: ProxyClient):
    return InterfacesClient(proxy), PeersClient(proxy)
