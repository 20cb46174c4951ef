"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Catalog backend
    catalog_base_url: str = ""  # empty = serve the bundled mock catalog
    catalog_timeout_seconds: float = 6.0

    # Local persistence
    store_dir: str = "data/episodic_store"

    # Creator defaults
    local_creator_id: str = "local-creator"
    default_show_title: str = "New Show"
    default_video_url: str = "mock-url-published"
    default_duration_seconds: int = 30

    # Application
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
