import httpx
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..api_log import ApiLogBook, ApiLogEntry
from ..config_store import MIKROTIK, RouterConnectionProfile
from ..errors import ProxyTransportError

REQUEST_HEADERS = {"Content-Type": "application/json"}


@dataclass
class ProxyEnvelope:
    """One device call, described to the local proxy as a JSON payload."""

    router_type: str
    endpoint: str
    port: str
    user: str
    password: str
    use_https: bool
    path: str
    method: str
    body: Optional[Any] = None

    @classmethod
    def for_profile(cls, profile: RouterConnectionProfile, path: str, method: str, body: Optional[Any] = None) -> "ProxyEnvelope":
        return cls(
            router_type=profile.router_type or MIKROTIK,
            endpoint=profile.endpoint,
            port=profile.port,
            user=profile.user,
            password=profile.password,
            use_https=profile.use_https,
            path=path,
            method=method.upper(),
            body=body,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "routerType": self.router_type,
            "endpoint": self.endpoint,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "useHttps": self.use_https,
            "path": self.path,
            "method": self.method,
        }
        if self.body is not None:
            payload["body"] = self.body
        return payload


@dataclass
class ProxyResponse:
    success: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None
    response_headers: Dict[str, str] = field(default_factory=dict)
    response_body: str = ""

    @classmethod
    def from_reply(cls, http_status: int, body: Any, headers: Dict[str, str], raw: str) -> "ProxyResponse":
        if not isinstance(body, dict):
            # A bare JSON value carries no success flag
            return cls(success=False, status=http_status, data=body, response_headers=headers, response_body=raw)
        status = body.get("status")
        if not isinstance(status, int) or isinstance(status, bool):
            status = http_status
        error = body.get("error")
        return cls(
            success=body.get("success") is True,
            status=status,
            data=body.get("data"),
            error=str(error) if error else None,
            response_headers=headers,
            response_body=raw,
        )


class ProxyClient:
    """Sends every router call as a single POST to the local proxy endpoint."""

    def __init__(
        self,
        proxy_url: str,
        timeout: float = 15.0,
        log_book: Optional[ApiLogBook] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.proxy_url = proxy_url
        self.timeout = timeout
        self.log_book = log_book if log_book is not None else ApiLogBook()
        self._transport = transport

    def send(self, profile: RouterConnectionProfile, path: str, method: str, body: Optional[Any] = None) -> ProxyResponse:
        envelope = ProxyEnvelope.for_profile(profile, path, method, body)
        return self.send_envelope(envelope)

    def send_envelope(self, envelope: ProxyEnvelope) -> ProxyResponse:
        started = time.monotonic()
        status: Optional[int] = None
        headers: Dict[str, str] = {}
        raw: Optional[str] = None
        error: Optional[str] = None
        try:
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as c:
                    r = c.post(self.proxy_url, json=envelope.to_payload(), headers=REQUEST_HEADERS)
            except httpx.TimeoutException as e:
                raise ProxyTransportError(f"proxy request timed out after {self.timeout:g}s") from e
            except httpx.HTTPError as e:
                raise ProxyTransportError(f"proxy request failed: {e}") from e
            status = r.status_code
            headers = dict(r.headers)
            raw = r.text
            # The body is authoritative even on non-2xx replies
            try:
                body = json.loads(raw) if raw else None
            except ValueError as e:
                raise ProxyTransportError(f"proxy returned a non-JSON body (HTTP {status})") from e
            return ProxyResponse.from_reply(status, body, headers, raw)
        except Exception as e:
            error = str(e) or e.__class__.__name__
            raise
        finally:
            self.log_book.add(
                ApiLogEntry(
                    method=envelope.method,
                    path=envelope.path,
                    status=status,
                    duration_ms=int((time.monotonic() - started) * 1000),
                    request_headers=dict(REQUEST_HEADERS),
                    response_headers=headers,
                    response_body=raw,
                    error=error,
                )
            )
