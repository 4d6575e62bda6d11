from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from schedule_bsuir.config import get_settings
from schedule_bsuir.db.models import Base

DATABASE_URL = get_settings().DATABASE_URL

# SQLAlchemy настройки
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=False, future=True, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def init_db():
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Зависимость FastAPI: дает открытый Session
    и гарантирует закрытие по завершении запроса.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
