from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    mongo_uri: str = "mongodb://localhost/databaseName"
    database_name: str = "databaseName"

    # Feature flags read once at startup.
    use_mongo: bool = True
    seed_mongo: bool = False
    seeds_dir: str = "seeds"
    seed_concurrency: int = 4

    log_level: str = "info"
    api_token: str = "dev-token"
    cors_origins: list[str] = ["*"]
    tracing_enabled: bool = True


SETTINGS = ApiSettings()
