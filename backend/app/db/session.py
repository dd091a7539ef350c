# backend/app/db/session.py
"""
Gestión de la conexión a la base de datos (SQLAlchemy).

Puntos clave:
- Construimos engine desde settings.resolve_database_url()
- Postgres (psycopg): connect_args con prepare_threshold=0 y connect_timeout.
- SQLite: check_same_thread=False y StaticPool si es en memoria
  (una única conexión compartida, lo que necesitan los tests).
- SQLite no aplica las FKs por defecto: activamos PRAGMA foreign_keys en cada
  conexión para que ON DELETE CASCADE funcione igual que en Postgres.
- NullPool opcional: recomendado cuando pasas por pooler (PgBouncer).
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from backend.app.core.config import is_sqlite_url, settings

logger = logging.getLogger(__name__)


def _should_use_nullpool(db_url: str) -> bool:
    """
    Decide si usar NullPool.

    - Si DB_USE_NULLPOOL está activado.
    - Si detectamos el puerto típico de poolers (6543).
    """
    if settings.DB_USE_NULLPOOL:
        return True

    p = urlparse(db_url)
    try:
        port = p.port or 0
    except ValueError:
        port = 0
    return port == 6543


def _is_memory_sqlite(db_url: str) -> bool:
    u = db_url.strip().lower()
    return u in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in u


def build_engine(db_url: str):
    """
    Crea el engine según el dialecto de la URL.
    """
    if is_sqlite_url(db_url):
        engine_kwargs = dict(
            future=True,
            connect_args={"check_same_thread": False},
        )
        if _is_memory_sqlite(db_url):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs = dict(
            pool_pre_ping=True,
            future=True,
            connect_args={
                "connect_timeout": 10,
                # prepare_threshold DEBE ser int: evita problemas con poolers
                "prepare_threshold": 0,
            },
        )
        if _should_use_nullpool(db_url):
            engine_kwargs["poolclass"] = NullPool

    eng = create_engine(db_url, **engine_kwargs)

    if eng.dialect.name == "sqlite":

        @event.listens_for(eng, "connect")
        def _sqlite_foreign_keys(dbapi_connection, connection_record):
            cur = dbapi_connection.cursor()
            try:
                cur.execute("PRAGMA foreign_keys=ON")
            finally:
                cur.close()

    logger.info("[db] engine listo dialect=%s", eng.dialect.name)
    return eng


DATABASE_URL = settings.resolve_database_url()

engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def get_db():
    """
    Dependencia FastAPI:
    - abre sesión
    - cierra sesión al finalizar
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
