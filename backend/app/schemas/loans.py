from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from backend.app.core.constants import LoanDirection, PaymentMethod
from backend.app.db.custom_types import ZERO, Money
from backend.app.schemas.base import ApiModel
from backend.app.utils.text_utils import require_text


# ============================
# Pydantic: PAGO DE PRÉSTAMO
# ============================

class LoanPaymentCreate(ApiModel):
    """
    Registro de un pago. Los pagos son inmutables: no hay update ni delete.
    """
    amount: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    paid_at: datetime
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class LoanPaymentOut(ApiModel):
    id: str
    loan_id: str
    amount: Money
    paid_at: datetime
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    created_at: datetime


# ============================
# Pydantic: PRÉSTAMO
# ============================

class LoanCreate(ApiModel):
    """
    Alta de préstamo.

    La persona se indica con:
    - person_id: persona existente del usuario, o
    - person_name (+ datos opcionales): se crea en la misma transacción.
    """
    person_id: Optional[str] = None
    person_name: Optional[str] = None
    person_nickname: Optional[str] = None
    person_email: Optional[EmailStr] = None
    person_phone: Optional[str] = None
    person_relationship: Optional[str] = None

    direction: LoanDirection
    amount: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    reason: str = Field(..., min_length=1)
    transaction_date: datetime
    expected_settlement: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: str) -> str:
        return require_text(v, "El motivo es obligatorio")

    @model_validator(mode="after")
    def _person_required(self):
        if not self.person_id and not (self.person_name or "").strip():
            raise ValueError("La persona es obligatoria (personId o personName)")
        return self


class LoanUpdate(ApiModel):
    """
    Campos opcionales para actualizar un préstamo.

    `is_settled` NO está: la liquidación la calcula el servidor a partir
    de los pagos (si viene en el body se ignora).
    """
    direction: Optional[LoanDirection] = None
    amount: Optional[Money] = Field(None, gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    reason: Optional[str] = Field(None, min_length=1)
    transaction_date: Optional[datetime] = None
    expected_settlement: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v, "El motivo es obligatorio")


class LoanPersonOut(ApiModel):
    id: str
    name: str
    nickname: Optional[str] = None


class LoanOut(ApiModel):
    """
    Préstamo completo con los campos calculados:
    - total_paid: Σ pagos
    - remaining: amount − total_paid (mínimo 0)
    """
    id: str
    person_id: str
    direction: LoanDirection
    amount: Money
    currency: str
    reason: str
    transaction_date: datetime
    expected_settlement: Optional[datetime] = None
    is_settled: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    total_paid: Money = ZERO
    remaining: Money = ZERO

    person: Optional[LoanPersonOut] = None
    payments: List[LoanPaymentOut] = []


class LoanPaymentResult(ApiModel):
    payment: LoanPaymentOut
    loan: LoanOut
