# bookrental/data/database.py
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from bookrental.utils.settings import DATABASE_URL, DB_LOCK_TIMEOUT_SECONDS


def connect_args_for(url: str) -> dict:
    """Ograniczony czas czekania na blokady - transakcja nie wisi w nieskonczonosc."""
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False, "timeout": DB_LOCK_TIMEOUT_SECONDS}
    if backend == "postgresql":
        ms = DB_LOCK_TIMEOUT_SECONDS * 1000
        return {"options": f"-c lock_timeout={ms} -c statement_timeout={ms * 2}"}
    return {}


def build_engine(url: str):
    kwargs = {"connect_args": connect_args_for(url)}
    if make_url(url).get_backend_name() != "sqlite":
        kwargs.update(pool_pre_ping=True, pool_recycle=1800)
    return create_engine(url, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # import modeli, zeby zarejestrowac tabele w Base.metadata
    import bookrental.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
