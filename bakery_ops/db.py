from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from bakery_ops.config import settings

connect_args = {}
if settings.database_url_normalized.startswith('sqlite'):
    connect_args = {'check_same_thread': False}

engine = create_engine(settings.database_url_normalized, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
