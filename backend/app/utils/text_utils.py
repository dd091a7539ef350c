# backend/app/utils/text_utils.py

"""
Utilidades de texto reutilizables en toda la app.

- normalize_lower: minúsculas + trim (usernames).
- clean_optional: trim de textos opcionales, None si quedan vacíos.
- require_text: trim de textos obligatorios, error si quedan vacíos (validadores).
"""

from __future__ import annotations

from typing import Optional


def normalize_lower(value: Optional[str]) -> Optional[str]:
    """
    Normaliza una cadena a minúsculas y elimina espacios al principio y final.

    Reglas:
    - Si value es None -> devuelve None.
    - Se hace strip() y lower().
    - Si tras strip() queda vacío -> devuelve None.

    Ejemplos:
    - "  Ana  " -> "ana"
    - "   "     -> None
    - None      -> None
    """
    if value is None:
        return None
    s = value.strip().lower()
    return s or None


def clean_optional(value: Optional[str]) -> Optional[str]:
    """
    Igual que normalize_lower pero respetando mayúsculas:
    - "  Primo  " -> "Primo"
    - ""          -> None
    """
    if value is None:
        return None
    s = value.strip()
    return s or None


def require_text(value: Optional[str], message: str) -> Optional[str]:
    """
    Texto obligatorio: trim y error si queda vacío.
    None pasa tal cual (campos opcionales de los UPDATE).
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        raise ValueError(message)
    return s
