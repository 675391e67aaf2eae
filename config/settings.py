"""Application settings using Pydantic Settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # OpenID Connect / Azure AD
    openid_config_url: str
    valid_audience: str
    valid_issuer: str
    client_id: str | None = None
    tenant_id: str | None = None
    admin_roles_claim: str = "roles"

    # Timezone
    timezone: str = "Asia/Kolkata"

    # Hierarchy
    hierarchy_cache_ttl_seconds: int = 300
    ancestor_walk_limit: int = 20
    require_same_department: bool = False
    drag_policy: Literal["strict", "privileged_tier"] = "strict"
    exclude_inactive_from_reads: bool = False


settings = Settings()
