"""
Application configuration settings.

All configuration is loaded from environment variables with sensible defaults.
"""
import json
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Grand Archive Meta"
    api_debug: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: list[str] = ["http://localhost:3000"]

    # Database
    postgres_host: str = "db"
    postgres_port: int = 5432
    postgres_user: str = "ga_meta"
    postgres_password: str = "ga_meta_password"
    postgres_db: str = "grand_archive_meta"
    database_url: str | None = None

    # Celery
    celery_broker_url: str = "redis://redis:6379/0"
    celery_result_backend: str = "redis://redis:6379/0"

    # Upstream APIs
    omnidex_base_url: str = "https://api.gatcg.com/omnidex"
    omni_web_base_url: str = "https://omni.gatcg.com/api"
    gatcg_base_url: str = "https://api.gatcg.com"
    user_agent: str = "GrandArchiveMeta/1.0"

    # Request pacing
    # The upstream has no published limit; 500ms between calls has been safe
    request_delay_ms: int = 500
    max_retries: int = 3
    request_timeout_secs: int = 10

    # Crawler
    crawler_max_misses: int = 10  # Consecutive misses before a crawl halts
    crawler_start_id: int = 1
    crawler_checkpoint_interval: int = 10
    # Daily crawl plus slack; an older checkpoint marks the crawler stale
    crawler_freshness_hours: int = 26

    # Meta aggregation
    meta_window_days: int = 30

    # Logging
    log_level: str | None = None  # Defaults to DEBUG when api_debug, else INFO

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @property
    def database_url_computed(self) -> str:
        """Compute database URL from components if not explicitly set."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@dataclass
class ClientConfig:
    """
    Shared configuration for every upstream fetch client.

    One instance is built per job and handed by reference to each client
    and to the crawler, so pacing, retry cap and the underlying HTTP
    connection pool are shared without any module-level state.
    """
    request_delay: float = 0.5  # seconds, applied after every response
    max_retries: int = 3
    timeout_seconds: float = 10.0
    user_agent: str = "GrandArchiveMeta/1.0"
    transport: Optional[httpx.AsyncBaseTransport] = None
    _http: Optional[httpx.AsyncClient] = field(default=None, init=False, repr=False)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "ClientConfig":
        """Build a client config from application settings."""
        source = source or settings
        return cls(
            request_delay=source.request_delay_ms / 1000.0,
            max_retries=source.max_retries,
            timeout_seconds=float(source.request_timeout_secs),
            user_agent=source.user_agent,
        )

    def http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
                follow_redirects=True,
                transport=self.transport,
            )
        return self._http

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None
