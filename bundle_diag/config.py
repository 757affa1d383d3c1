"""Diagnostics configuration management."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class DiagConfig(BaseSettings):
    """Diagnostics configuration from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Chain access
    rpc_url: str = "https://arb1.arbitrum.io/rpc"
    rpc_timeout_default: int = 10

    # Protocol contract whose logs are decoded (EntryPoint v0.8)
    entry_point_address: str = "0x4337084D9E255Ff0702461CF8895CE9E3b5Ff108"

    # Bundle tx to diagnose when none is given on the command line
    diag_tx_hash: Optional[str] = None

    # API Server
    api_port: int = 8000
    api_host: str = "0.0.0.0"
    cors_origins: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


config = DiagConfig()
