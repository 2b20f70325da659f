from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Patient Records API"
    database_url: str = (
        "postgresql+psycopg2://records:records@db:5432/records"  # pragma: allowlist secret
    )
    sql_echo: bool = False
    auto_migrate: bool = True
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    default_actor: str = "System"
    default_page_size: int = 10
    max_page_size: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
