# backend/app/core/config.py
"""
Configuración central del backend.

Objetivos del diseño:
1) Evitar credenciales "hardcodeadas" en código.
2) Tener UNA fuente de verdad para la BD en runtime: DATABASE_URL.
3) Normalizar la URL de Postgres:
   - driver psycopg (no psycopg2)
   - sslmode=require
4) Aceptar SQLite tal cual (tests y uso local).

NOTA práctica:
- No pongas valores entre comillas en el panel del hosting. Ej: DATABASE_URL=postgresql+...
  Si pones DATABASE_URL="postgresql+..." las comillas forman parte del valor.
"""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic_settings import BaseSettings


def _strip_wrapping_quotes(value: str) -> str:
    """
    Elimina comillas envolventes si el usuario las puso en el .env.
    Ej: '"abc"' -> 'abc'
    """
    v = (value or "").strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        return v[1:-1].strip()
    return v


def _ensure_psycopg_driver(url: str) -> str:
    """
    Fuerza a usar psycopg3 en SQLAlchemy:
    - postgresql://...                -> postgresql+psycopg://...
    - postgres://...                  -> postgresql+psycopg://...
    - postgresql+psycopg2://...       -> postgresql+psycopg://...
    """
    u = url.strip()
    u = re.sub(r"^postgresql\+psycopg2://", "postgresql+psycopg://", u)
    u = re.sub(r"^postgres://", "postgresql+psycopg://", u)
    u = re.sub(r"^postgresql://", "postgresql+psycopg://", u)
    return u


def _append_query_param(url: str, key: str, value: str) -> str:
    """
    Añade un query param si no existe ya.
    """
    if re.search(rf"(^|[?&]){re.escape(key)}=", url):
        return url
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{key}={value}"


def _csv_to_list(value: str) -> List[str]:
    """
    Convierte 'a,b,c' -> ['a','b','c'] ignorando vacíos.
    """
    v = (value or "").strip()
    if not v:
        return []
    return [x.strip() for x in v.split(",") if x.strip()]


def is_sqlite_url(url: str) -> bool:
    return (url or "").strip().lower().startswith("sqlite")


class Settings(BaseSettings):
    """
    Ajustes de la aplicación.

    Nota:
    - BaseSettings lee variables de entorno y valida tipos.
    - Todo viene como string; Pydantic convierte a int/bool/etc.
    """

    # ---- entorno general
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # ---- seguridad / sesión (JWT en cookie)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "session"
    SESSION_MAX_AGE_DAYS: int = 30

    # ---- CORS: CSV en env "http://a,http://b". Vacío -> '*'
    CORS_ORIGINS: str = ""

    # ---- base de datos
    DATABASE_URL: Optional[str] = None
    DB_USE_NULLPOOL: bool = False
    BOOTSTRAP_CREATE_ALL: bool = False

    # ---- negocio
    DEFAULT_CURRENCY: str = "BRL"
    UPCOMING_WINDOW_DAYS: int = 7

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins_list(self) -> List[str]:
        return _csv_to_list(self.CORS_ORIGINS)

    @property
    def is_production(self) -> bool:
        return (self.ENV or "").strip().lower() in ("production", "prod")

    @property
    def session_max_age_seconds(self) -> int:
        return self.SESSION_MAX_AGE_DAYS * 24 * 60 * 60

    def resolve_database_url(self) -> str:
        """
        Decide qué URL de BD usar.

        - Si no hay DATABASE_URL -> error explícito.
        - SQLite se devuelve sin tocar.
        - Postgres se normaliza: driver psycopg + sslmode=require.
        """
        chosen = _strip_wrapping_quotes(self.DATABASE_URL or "")

        if not chosen:
            raise RuntimeError("No hay URL de base de datos. Define DATABASE_URL.")

        if is_sqlite_url(chosen):
            return chosen

        chosen = _ensure_psycopg_driver(chosen)
        chosen = _append_query_param(chosen, "sslmode", "require")
        return chosen


# Instancia global
settings = Settings()
