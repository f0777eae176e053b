class ConsoleError(Exception):
    """Base class for errors surfaced to the operator as notifications."""


class NotConfiguredError(ConsoleError):
    def __init__(self, message: str = "router connection profile not configured"):
        super().__init__(message)


class IncompleteConfigError(ConsoleError):
    def __init__(self, message: str = "router connection profile is incomplete"):
        super().__init__(message)


class UnsupportedRouterError(ConsoleError):
    def __init__(self, router_type: str, expected: str = "mikrotik"):
        self.router_type = router_type
        self.expected = expected
        super().__init__(f"router type '{router_type}' is not supported (expected '{expected}')")


class ProxyTransportError(ConsoleError):
    """Network error, timeout or an undecodable proxy reply."""


class BackendApiError(ConsoleError):
    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)
