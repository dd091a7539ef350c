# backend/app/schemas/expenses.py

"""
Schemas Pydantic para GASTOS RECURRENTES.

- Importes con tipo Money (Decimal por debajo), > 0 y 2 decimales.
- dueDay 1..31; dueMonth 1..12 (solo tiene sentido en anuales: para
  mensuales el servidor lo deja a NULL).
- En UPDATE todo es opcional; un null explícito limpia el campo.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from backend.app.core.constants import ExpenseCategory, PaymentMethod, RecurrenceType
from backend.app.db.custom_types import Money
from backend.app.schemas.base import ApiModel
from backend.app.utils.text_utils import require_text


class ExpenseBase(ApiModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    amount: Money = Field(..., gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    category: ExpenseCategory = ExpenseCategory.other
    recurrence: RecurrenceType
    payment_method: PaymentMethod

    due_day: Optional[int] = Field(None, ge=1, le=31)
    due_month: Optional[int] = Field(None, ge=1, le=12)

    start_date: datetime
    end_date: Optional[datetime] = None

    notes: Optional[str] = None
    url: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        return require_text(v, "El nombre del gasto es obligatorio")


class ExpenseCreate(ExpenseBase):
    """
    Para creación el servidor genera id, user_id y timestamps.
    Si no viene currency se usa la moneda por defecto de la configuración.
    """
    pass


class ExpenseUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    amount: Optional[Money] = Field(None, gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    category: Optional[ExpenseCategory] = None
    recurrence: Optional[RecurrenceType] = None
    payment_method: Optional[PaymentMethod] = None

    due_day: Optional[int] = Field(None, ge=1, le=31)
    due_month: Optional[int] = Field(None, ge=1, le=12)

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    notes: Optional[str] = None
    url: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v, "El nombre del gasto es obligatorio")


class ExpenseOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    amount: Money
    currency: str

    category: ExpenseCategory
    recurrence: RecurrenceType
    payment_method: PaymentMethod

    due_day: Optional[int] = None
    due_month: Optional[int] = None

    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool

    notes: Optional[str] = None
    url: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class ExpenseGroups(ApiModel):
    monthly: List[ExpenseOut]
    yearly: List[ExpenseOut]


class ExpenseTotals(ApiModel):
    monthly: Money
    yearly: Money
    yearly_as_monthly: Money
    effective_monthly: Money


class ExpenseListOut(ApiModel):
    expenses: ExpenseGroups
    totals: ExpenseTotals
