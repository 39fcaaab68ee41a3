from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Shipped clustering parameters live in the repository-level config directory
_DEFAULT_CLUSTERING_CONFIG = Path("config") / "clustering.yaml"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUESTION_DEDUP_")

    clustering_config_path: Path = _DEFAULT_CLUSTERING_CONFIG
    log_json: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
