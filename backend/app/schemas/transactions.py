"""
Schemas del LIBRO DE CUENTAS (transacciones con una persona).

- type es un enumerado cerrado: lent | received.
- amount > 0 siempre; el signo lo da el tipo.
- Las transacciones son append-only: lo único modificable es `disregarded`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from backend.app.core.constants import TransactionType
from backend.app.db.custom_types import Money
from backend.app.schemas.base import ApiModel


class TransactionCreate(ApiModel):
    type: TransactionType
    amount: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    date: datetime
    description: Optional[str] = None


class TransactionPatch(ApiModel):
    disregarded: bool


class TransactionOut(ApiModel):
    id: str
    person_id: str
    type: TransactionType
    amount: Money
    date: datetime
    description: Optional[str] = None
    disregarded: bool
    created_at: datetime
