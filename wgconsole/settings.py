from pydantic_settings import BaseSettings
from pydantic import Field


class AppSettings(BaseSettings):
    app_name: str = Field(default="wg-console")
    secret_key: str = Field(default="change-me")
    database_url: str = Field(default="sqlite:///./wgconsole.db")
    debug: bool = Field(default=True)

    # Local backend (router proxy + config store)
    proxy_url: str = Field(default="http://localhost:5000/api/router/proxy")
    backend_api_url: str = Field(default="http://localhost:5000/api")
    proxy_timeout_seconds: float = Field(default=15.0)

    # Logging
    log_level: str = Field(default="INFO")
    api_log_capacity: int = Field(default=200)

    # Client config defaults
    client_dns: str = Field(default="1.1.1.1")
    client_default_address: str = Field(default="10.0.0.10/32")
    client_default_endpoint: str = Field(default="vpn.stacasa.local")
    client_default_port: int = Field(default=51820)
    allowed_address_base: str = Field(default="10.0.0")

    class Config:
        env_file = ".env"


settings = AppSettings()
