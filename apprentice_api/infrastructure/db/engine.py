from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine


@lru_cache(maxsize=4)
def get_engine(dsn: str):
    return create_engine(dsn, future=True, pool_pre_ping=True, pool_recycle=3600)
