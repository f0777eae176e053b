import logging
from typing import Any, Optional

import httpx

from .errors import BackendApiError

logger = logging.getLogger(__name__)


class BackendApiService:
    """Client for the local backend's config, user and auth endpoints."""

    def __init__(self, base_url: str, timeout: float = 15.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def request(self, endpoint: str, method: str = "GET", json: Optional[Any] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as c:
                r = c.request(method, url, json=json, headers={"Content-Type": "application/json"})
                try:
                    data = r.json()
                except ValueError:
                    data = None
            if not r.is_success:
                message = None
                if isinstance(data, dict):
                    message = data.get("error")
                raise BackendApiError(message or f"HTTP error! status: {r.status_code}", status=r.status_code)
            return data
        except Exception as e:
            logger.error("API request failed: %s: %s", endpoint, e)
            raise

    # User management
    def get_users(self):
        return self.request("/users")

    def create_user(self, name: str, email: str, password: str, enabled: bool = True):
        return self.request("/users", "POST", {"name": name, "email": email, "password": password, "enabled": enabled})

    def update_user(self, user_id: str, **fields):
        return self.request(f"/users/{user_id}", "PUT", fields)

    def delete_user(self, user_id: str):
        return self.request(f"/users/{user_id}", "DELETE")

    def login(self, email: str, password: str):
        return self.request("/auth/login", "POST", {"email": email, "password": password})

    # Router configuration
    def get_router_config(self):
        return self.request("/config/router")

    def save_router_config(self, config: dict):
        return self.request("/config/router", "POST", config)

    # WireGuard configuration
    def get_wireguard_config(self):
        return self.request("/config/wireguard")

    def save_wireguard_config(self, config: dict):
        return self.request("/config/wireguard", "POST", config)
