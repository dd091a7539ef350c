# backend/app/main.py

"""
Punto de entrada principal del backend de finanzas personales.

Aquí definimos:
- La instancia de FastAPI.
- CORS.
- Errores de validación -> 400.
- Endpoints base: /, /health, /ready.
- Routers de negocio (api/v1).

IMPORTANTE:
- Cargamos backend/.env antes de inicializar settings / engine.
"""

from __future__ import annotations

import logging
from pathlib import Path

# ---------------------------------------------------------------------------
# 0) Carga de variables de entorno (backend/.env) ANTES de importar engine
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

# backend/.env => parents[1] del directorio "app" = ".../backend"
BACKEND_ENV = Path(__file__).resolve().parents[1] / ".env"
if BACKEND_ENV.is_file():
    load_dotenv(BACKEND_ENV)
else:
    # fallback: .env en el CWD si existe
    load_dotenv()

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy import text as sa_text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.db import models  # noqa: F401  (registra las tablas en Base.metadata)
from backend.app.db.base import Base
from backend.app.db.session import engine, get_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 1) Generador de operation_id únicos
# ---------------------------------------------------------------------------
def custom_generate_unique_id(route: APIRoute) -> str:
    """
    Genera un operation_id estable y único para OpenAPI.

    Patrón: <tag>_<route.name>
    """
    tag_prefix = route.tags[0] if route.tags else "default"
    return f"{tag_prefix}_{route.name}"


# ---------------------------------------------------------------------------
# 2) Crear la app FastAPI
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Ledger API",
    version="0.1.0",
    description="Gastos recurrentes, libro de cuentas con personas y préstamos.",
    generate_unique_id_function=custom_generate_unique_id,
)


# ---------------------------------------------------------------------------
# 3) CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# 4) Errores de validación: 400 en vez del 422 por defecto
# ---------------------------------------------------------------------------
def _validation_message(errors: list) -> str:
    if not errors:
        return "Datos no válidos"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = str(first.get("msg", "Datos no válidos"))
    # "Value error, ..." viene de los validadores propios
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{loc}: {msg}" if loc else msg


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info("[validation] %s %s errores=%s", request.method, request.url.path, len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": _validation_message(errors),
            "errors": jsonable_encoder(errors, custom_encoder={Exception: str}),
        },
    )


# ---------------------------------------------------------------------------
# 5) Evento startup
# ---------------------------------------------------------------------------
@app.on_event("startup")
def on_startup() -> None:
    """
    Arranque del backend.

    - Crea las tablas si BOOTSTRAP_CREATE_ALL (entornos locales / tests).
    - Comprueba conectividad con la BD.
    """
    if settings.BOOTSTRAP_CREATE_ALL:
        Base.metadata.create_all(bind=engine)
        logger.info("[startup] create_all ejecutado")

    try:
        with engine.connect() as conn:
            conn.execute(sa_text("SELECT 1"))
        logger.info("[startup] BD accesible (env=%s)", settings.ENV)
    except SQLAlchemyError:
        logger.exception("[startup] Error al comprobar la BD")


# ---------------------------------------------------------------------------
# 6) Endpoints básicos
# ---------------------------------------------------------------------------
@app.get("/", tags=["core"])
def root() -> dict:
    """Endpoint raíz de la API."""
    return {"message": "Ledger backend is running"}


@app.get("/health", tags=["core"])
def health_simple() -> dict:
    """Servidor vivo (sin tocar BD)."""
    return {"status": "ok"}


@app.get("/ready", tags=["core"])
def ready(db: Session = Depends(get_db)) -> dict:
    """
    Readiness check:
    - servidor vivo + BD accesible
    """
    try:
        db.execute(sa_text("SELECT 1"))
        return {"status": "ok", "db": "reachable"}
    except SQLAlchemyError as e:
        logger.warning("[ready] BD no accesible: %s", e)
        return {"status": "error", "db": "unreachable", "detail": str(e)}


# ---------------------------------------------------------------------------
# 7) Routers de negocio (v1)
# ---------------------------------------------------------------------------
from backend.app.api.v1 import (
    auth_router,
    dashboard_router,
    expenses_router,
    loans_router,
    people_router,
)

API_V1 = "/api/v1"

app.include_router(auth_router.router,      prefix=API_V1)
app.include_router(expenses_router.router,  prefix=API_V1)
app.include_router(people_router.router,    prefix=API_V1)
app.include_router(loans_router.router,     prefix=API_V1)
app.include_router(dashboard_router.router, prefix=API_V1)
