"""
Autenticación por username + PIN.

Endpoints:
- POST   /api/v1/auth  -> login o registro (si el username no existe se crea)
- GET    /api/v1/auth  -> sesión actual ({user: null} si no hay)
- DELETE /api/v1/auth  -> logout (borra la cookie)

Reglas de negocio principales:
- El username se guarda en minúsculas.
- El PIN son 1-4 dígitos; PIN incorrecto -> 401.
- La sesión es un JWT (sub = id de usuario) en una cookie HttpOnly de
  30 días. También se acepta el mismo token como "Authorization: Bearer"
  (clientes móviles).
- No hay refresh ni revocación: el token caduca con la cookie.

IMPORTANTE:
- `require_user` es la única dependencia de identidad. Devuelve el User y
  cada router pasa `current_user.id` explícitamente a las comprobaciones de
  propiedad.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, Security, status
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.db import models
from backend.app.db.session import get_db
from backend.app.schemas.auth import LoginIn, LoginOut, SessionOut, UserOut
from backend.app.schemas.base import SuccessOut

logger = logging.getLogger(__name__)

# ---------- Router ----------
router = APIRouter(prefix="/auth", tags=["auth"])
cookie_scheme = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


# ---------- Helpers internos ----------
def create_session_token(sub: str, days: int = settings.SESSION_MAX_AGE_DAYS) -> str:
    """
    Crea un JWT con:
    - sub: identificador del usuario
    - iat: momento de emisión (timestamp)
    - exp: momento de expiración (iat + days)
    """
    now = datetime.now(tz=timezone.utc)
    exp = now + timedelta(days=days)
    payload = {"sub": sub, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> str:
    """
    Devuelve el 'sub' del token o lanza 401.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        # Señal clara para el cliente para hacer logout
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="token_expired",
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sesión inválida",
        )

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sesión inválida",
        )
    return str(sub)


def _pick_token(
    cookie_token: Optional[str],
    bearer: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if cookie_token:
        return cookie_token
    if bearer and bearer.scheme.lower() == "bearer" and bearer.credentials:
        return bearer.credentials
    return None


def _set_session_cookie(response: Response, user_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user_id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def require_user(
    cookie_token: Optional[str] = Security(cookie_scheme),
    bearer: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    """
    Dependencia que obliga a estar autenticado.

    - Lee el token de la cookie de sesión (o del header Bearer).
    - Decodifica el JWT.
    - Valida que el usuario exista.

    Si falla, lanza 401.
    """
    token = _pick_token(cookie_token, bearer)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autorizado",
        )

    user_id = decode_session_token(token)
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autorizado",
        )
    return user


# =========================================================
# Endpoints
# =========================================================
@router.post("", response_model=LoginOut)
def login(data: LoginIn, response: Response, db: Session = Depends(get_db)):
    """
    Login o registro.

    Flujo:
    1. Busca el usuario por username (ya normalizado a minúsculas).
    2. Si existe: compara el PIN (401 si no coincide).
    3. Si no existe: lo crea con ese PIN y responde 201.
    4. En ambos casos deja la cookie de sesión.
    """
    user = db.execute(
        select(models.User).where(models.User.username == data.username)
    ).scalar_one_or_none()

    if user is not None:
        if not secrets.compare_digest(user.pin, data.pin):
            logger.info("[auth] PIN incorrecto username=%s", data.username)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="PIN incorrecto",
            )

        _set_session_cookie(response, user.id)
        logger.info("[auth] login user_id=%s", user.id)
        return LoginOut(
            user=UserOut.model_validate(user),
            message="Sesión iniciada correctamente",
        )

    user = models.User(username=data.username, pin=data.pin)
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # Otro alta simultánea con el mismo username
        db.rollback()
        raise HTTPException(status_code=409, detail="El usuario ya existe, vuelve a intentarlo.")
    db.refresh(user)

    _set_session_cookie(response, user.id)
    response.status_code = status.HTTP_201_CREATED
    logger.info("[auth] registro user_id=%s", user.id)
    return LoginOut(
        user=UserOut.model_validate(user),
        message="Cuenta creada correctamente",
        is_new_user=True,
    )


@router.get("", response_model=SessionOut)
def current_session(
    cookie_token: Optional[str] = Security(cookie_scheme),
    bearer: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_db),
):
    """
    Devuelve el usuario de la sesión actual, o {user: null}.
    Nunca responde 401.
    """
    token = _pick_token(cookie_token, bearer)
    if not token:
        return SessionOut(user=None)

    try:
        user_id = decode_session_token(token)
    except HTTPException:
        return SessionOut(user=None)

    user = db.get(models.User, user_id)
    if not user:
        return SessionOut(user=None)
    return SessionOut(user=UserOut.model_validate(user))


@router.delete("", response_model=SuccessOut)
def logout(response: Response):
    """Borra la cookie de sesión."""
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return SuccessOut()
