import os
from pydantic import BaseModel

VERSION = "1.0.0"

def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default

def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

class Settings(BaseModel):
    database_url: str = "sqlite:///./movies.db"
    db_pool_size: int = 25
    db_pool_timeout: int = 30
    query_timeout_seconds: float = 3.0
    create_schema: bool = True
    environment: str = "development"
    log_level: str = "INFO"
    version: str = VERSION

def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./movies.db"),
        db_pool_size=_env_int("DB_POOL_SIZE", 25),
        db_pool_timeout=_env_int("DB_POOL_TIMEOUT", 30),
        query_timeout_seconds=_env_float("QUERY_TIMEOUT_SECONDS", 3.0),
        create_schema=_env_bool("DB_CREATE_SCHEMA", True),
        environment=os.getenv("ENVIRONMENT", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
