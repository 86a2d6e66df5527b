from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .config import get_settings


@lru_cache
def get_sessionmaker() -> sessionmaker:
    settings = get_settings()
    if not settings.postgres_url:
        raise RuntimeError("POSTGRES_URL must be set when DATA_BACKEND=database")
    # Using synchronous SQLAlchemy engine with psycopg
    engine = create_engine(settings.postgres_url, future=True)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

