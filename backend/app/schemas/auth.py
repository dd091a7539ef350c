"""
Schemas Pydantic v2 para el login por PIN.

Reglas de negocio principales:
- El username se guarda en minúsculas y sin espacios alrededor.
- El PIN son de 1 a 4 dígitos. No es una credencial de seguridad, solo un
  disuasorio para dispositivos compartidos.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import Field, field_validator

from backend.app.core.constants import PIN_PATTERN
from backend.app.schemas.base import ApiModel
from backend.app.utils.text_utils import normalize_lower


class LoginIn(ApiModel):
    """
    Datos de entrada del login-o-registro:

    - username: identificador único (se normaliza a minúsculas).
    - pin: 1-4 dígitos, como texto ("0042" no es lo mismo que "42").
    """
    username: str = Field(..., description="Nombre de usuario.", examples=["ana"])
    pin: str = Field(..., description="PIN numérico de 1 a 4 dígitos.", examples=["1234"])

    @field_validator("username")
    @classmethod
    def _username_required(cls, v: str) -> str:
        norm = normalize_lower(v)
        if not norm:
            raise ValueError("El username es obligatorio")
        return norm

    @field_validator("pin", mode="before")
    @classmethod
    def _pin_as_text(cls, v):
        # clientes que mandan el PIN como número JSON: 1234 -> "1234"
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("pin")
    @classmethod
    def _pin_format(cls, v: str) -> str:
        if not re.match(PIN_PATTERN, v or ""):
            raise ValueError("El PIN debe tener entre 1 y 4 dígitos")
        return v


class UserOut(ApiModel):
    id: str
    username: str


class LoginOut(ApiModel):
    user: UserOut
    message: str
    is_new_user: bool = False


class SessionOut(ApiModel):
    user: Optional[UserOut] = None
