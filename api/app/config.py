from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings
from pydantic import Field, AnyUrl, field_validator


class Settings(BaseSettings):
    app_name: str = "Dashboard API"
    app_env: str = Field("development", alias="APP_ENV")
    app_url: AnyUrl | str = Field("http://localhost:5173", alias="APP_URL")

    # "fixtures" reads JSON files from data_dir, "database" goes through SQLAlchemy
    data_backend: Literal["fixtures", "database"] = Field("fixtures", alias="DATA_BACKEND")
    data_dir: Path = Field(Path(__file__).parent / "data", alias="DATA_DIR")
    postgres_url: str | None = Field(None, alias="POSTGRES_URL")

    supabase_url: str = Field("", alias="SUPABASE_URL")
    supabase_jwt_secret: str = Field("", alias="SUPABASE_JWT_SECRET")
    supabase_jwt_audience: str = Field("authenticated", alias="SUPABASE_JWT_AUDIENCE")

    timezone: str = Field("UTC", alias="APP_TIMEZONE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
