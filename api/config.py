"""Runtime settings read from the environment (and .env, when present)."""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


def _build_dsn_from_env() -> str:
    host = os.getenv("PGHOST", "localhost")
    port = os.getenv("PGPORT", "5432")
    dbname = os.getenv("PGDATABASE", "golf_tournaments")
    user = os.getenv("PGUSER", "postgres")
    password = os.getenv("PGPASSWORD", "")

    if password:
        return f"postgresql://{user}:{password}@{host}:{port}/{dbname}"
    return f"postgresql://{user}@{host}:{port}/{dbname}"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str
    db_pool_min: int = Field(2, ge=1)
    db_pool_max: int = Field(10, ge=1)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"
    log_format: str = "console"
    object_storage_public_prefix: Optional[str] = None
    # Run database/schema.sql at startup; every statement is idempotent
    apply_schema: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "http://localhost:5173")
        return cls(
            database_url=os.getenv("DATABASE_URL") or _build_dsn_from_env(),
            db_pool_min=int(os.getenv("DB_POOL_MIN", "2")),
            db_pool_max=int(os.getenv("DB_POOL_MAX", "10")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "console"),
            object_storage_public_prefix=os.getenv("OBJECT_STORAGE_PUBLIC_PREFIX") or None,
            apply_schema=os.getenv("APPLY_SCHEMA", "false").lower() in ("1", "true", "yes"),
        )
