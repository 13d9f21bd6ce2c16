# app/data/database.py
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.utils.logging import get_logger
from app.utils.retry import db_connect_retry

logger = get_logger(__name__)

Base = declarative_base()


class Database:
    """
    Wlasciciel engine i fabryki sesji.
    Tworzony jawnie przy starcie aplikacji (lifespan) i trzymany w app.state,
    zamiast globalnego engine na poziomie modulu.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @db_connect_retry()
    def connect(self) -> None:
        if self.engine is not None:
            return
        engine = create_engine(self.url, echo=self.echo, future=True, **self.engine_kwargs)
        # sprawdz polaczenie od razu, zeby blad wyszedl przy starcie a nie w pierwszym requescie
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            engine.dispose()
            raise
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
            future=True,
        )
        logger.info("Database connection established")

    def create_all(self) -> None:
        # import modeli rejestruje tabele w Base.metadata
        import app.data.models  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())
        logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def ping(self) -> bool:
        try:
            with self._require_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database connection closed")

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database is not connected")
        return self.engine


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
