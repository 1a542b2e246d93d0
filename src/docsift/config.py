from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "docsift"
    env: str = "development"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class SiteConfig(BaseModel):
    """Layout of the documentation site being searched."""

    # Absolute origin the index artifact is fetched from
    origin: str = "http://localhost:3000"
    # Site base path; always starts and ends with "/"
    base_url: str = "/"
    docs_base_path: str = "docs"
    blog_base_path: str = "blog"

    @property
    def base_location(self) -> str:
        """Absolute URL of the site root (origin + base path)."""
        return self.origin.rstrip("/") + self.base_url


class SearchConfig(BaseModel):
    """Index loading and ranking configuration values."""

    # Whether a prebuilt index artifact exists (production builds only)
    index_available: bool = False
    index_path: str = "search-index.json"
    max_results: int = 8
    title_boost: float = 5.0
    content_boost: float = 1.0
    versioning_enabled: bool = False
    version: Optional[str] = None
    timeout: float = 30.0


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSIFT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    site: SiteConfig = SiteConfig()
    search: SearchConfig = SearchConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
