from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class DbSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    mongo_uri: str = "mongodb://localhost/databaseName"
    database_name: str = "databaseName"
    seeds_dir: str = "seeds"
    seed_concurrency: int = 4
    log_level: str = "info"


SETTINGS = DbSettings()
