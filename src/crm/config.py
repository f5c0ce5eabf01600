"""Application configuration with structured settings groups."""
import logging

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# =============================================================================
# Nested Settings Models
# =============================================================================


class ListingSettings(BaseModel):
    """
    Client listing pagination settings.

    Page sizes outside [1, max_page_size] are silently replaced by default_page_size.
    """

    default_page_size: int = 10
    max_page_size: int = 100


class LoopsSettings(BaseModel):
    """
    Loops.so contact sync settings.

    Sync is a no-op unless enabled is true and api_key is set.
    Example: LOOPS__ENABLED=true, LOOPS__API_KEY=...
    """

    api_key: str | None = None
    base_url: str = "https://app.loops.so/api/v1"
    enabled: bool = False
    default_source: str = "CRM API"
    timeout_seconds: float = 30


class CorsSettings(BaseModel):
    """Origins allowed to call the API from a browser."""

    allow_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]


class SeedSettings(BaseModel):
    """
    Sample data loaded at startup into an empty clients table.

    random_seed keeps the generated names, companies and flags reproducible.
    """

    enabled: bool = False
    count: int = 150
    random_seed: int = 42


class BackgroundSettings(BaseModel):
    """Detached task settings."""

    shutdown_timeout_seconds: float = 5.0


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Application settings with nested configuration groups.

    Environment variables use double underscore as delimiter for nested values.
    Example: LISTING__DEFAULT_PAGE_SIZE=20, LOOPS__TIMEOUT_SECONDS=10
    """

    # Application metadata
    app_name: str = "CRM API"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "postgresql+asyncpg://localhost/crm"

    # Nested settings groups
    listing: ListingSettings = ListingSettings()
    loops: LoopsSettings = LoopsSettings()
    cors: CorsSettings = CorsSettings()
    seed: SeedSettings = SeedSettings()
    background: BackgroundSettings = BackgroundSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def loops_sync_available(self) -> bool:
        """Check if Loops sync is enabled and has an API key."""
        return self.loops.enabled and bool(self.loops.api_key and self.loops.api_key.strip())

