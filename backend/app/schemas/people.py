# backend/app/schemas/people.py

"""
Schemas Pydantic para PERSONAS (con quien se presta / se pide prestado).

- El saldo NO se guarda: se calcula en cada lectura a partir de las
  transacciones no descartadas.
- balance > 0 -> me deben (they_owe_me); < 0 -> debo (i_owe_them).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from backend.app.db.custom_types import ZERO, Money
from backend.app.schemas.base import ApiModel
from backend.app.schemas.loans import LoanOut
from backend.app.schemas.transactions import TransactionOut
from backend.app.utils.text_utils import require_text


class PersonBase(ApiModel):
    name: str = Field(..., min_length=1)
    nickname: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        return require_text(v, "El nombre es obligatorio")


class PersonCreate(PersonBase):
    pass


class PersonUpdate(ApiModel):
    """
    Solo se modifican los campos que vengan en el body.
    """
    name: Optional[str] = Field(None, min_length=1)
    nickname: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v, "El nombre es obligatorio")


class PersonOut(ApiModel):
    id: str
    name: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PersonWithBalanceOut(PersonOut):
    balance: Money = ZERO
    balance_direction: str
    transactions_count: int = 0
    active_loans_count: int = 0


class PersonDetailOut(PersonWithBalanceOut):
    transactions: List[TransactionOut] = []
    loans: List[LoanOut] = []


class LedgerTotals(ApiModel):
    they_owe_me: Money
    i_owe_them: Money
    net_balance: Money


class PeopleListOut(ApiModel):
    people: List[PersonWithBalanceOut]
    totals: LedgerTotals
