# backend/app/api/v1/expenses_router.py

"""
Router de GASTOS RECURRENTES.

Endpoints:
- GET    /api/v1/expenses        -> lista agrupada (mensual/anual) + totales
- POST   /api/v1/expenses        -> crear
- GET    /api/v1/expenses/{id}   -> detalle
- PUT    /api/v1/expenses/{id}   -> actualizar
- DELETE /api/v1/expenses/{id}   -> borrado físico

Reglas de negocio:
- Solo se ven/modifican los gastos del usuario autenticado (404 si no).
- `is_active` lo controla el usuario; borrar es borrar de verdad.
- Para gastos mensuales `due_month` se fuerza a NULL.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.api.v1.auth_router import require_user
from backend.app.core.config import settings
from backend.app.core.constants import RecurrenceType
from backend.app.db import models
from backend.app.db.session import get_db
from backend.app.schemas.base import SuccessOut
from backend.app.schemas.expenses import (
    ExpenseCreate,
    ExpenseGroups,
    ExpenseListOut,
    ExpenseOut,
    ExpenseTotals,
    ExpenseUpdate,
)
from backend.app.utils.expense_utils import project_expenses
from backend.app.utils.ownership import get_owned_expense
from backend.app.utils.text_utils import clean_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=ExpenseListOut)
def list_expenses(
    active: Optional[bool] = Query(None, description="Si es true, solo gastos activos."),
    recurrence: Optional[RecurrenceType] = Query(None, description="monthly o yearly"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Lista los gastos del usuario agrupados por recurrencia.

    Orden: día de vencimiento ascendente (sin día al final) y, a igualdad,
    los más recientes primero.
    """
    stmt = select(models.RecurringExpense).where(models.RecurringExpense.user_id == current_user.id)
    if active:
        stmt = stmt.where(models.RecurringExpense.is_active.is_(True))
    if recurrence:
        stmt = stmt.where(models.RecurringExpense.recurrence == recurrence)

    stmt = stmt.order_by(
        models.RecurringExpense.due_day.is_(None),
        models.RecurringExpense.due_day.asc(),
        models.RecurringExpense.created_at.desc(),
    )
    rows = db.execute(stmt).scalars().all()

    summary = project_expenses(
        rows,
        datetime.now(timezone.utc).date(),
        window_days=settings.UPCOMING_WINDOW_DAYS,
    )

    return ExpenseListOut(
        expenses=ExpenseGroups(
            monthly=[ExpenseOut.model_validate(e) for e in summary["monthly"]],
            yearly=[ExpenseOut.model_validate(e) for e in summary["yearly"]],
        ),
        totals=ExpenseTotals(
            monthly=summary["monthly_total"],
            yearly=summary["yearly_total"],
            yearly_as_monthly=summary["yearly_as_monthly"],
            effective_monthly=summary["effective_monthly"],
        ),
    )


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Crea un gasto recurrente para el usuario actual.
    """
    now = datetime.now(timezone.utc)
    due_month = payload.due_month if payload.recurrence == RecurrenceType.yearly else None

    row = models.RecurringExpense(
        user_id=current_user.id,
        name=payload.name.strip(),
        description=clean_optional(payload.description),
        amount=payload.amount,
        currency=(payload.currency or settings.DEFAULT_CURRENCY).upper(),
        category=payload.category,
        recurrence=payload.recurrence,
        payment_method=payload.payment_method,
        due_day=payload.due_day,
        due_month=due_month,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_active=payload.is_active,
        notes=clean_optional(payload.notes),
        url=clean_optional(payload.url),
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(row)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Conflicto de integridad al crear el gasto.")

    db.refresh(row)
    logger.info("[expenses] crear user_id=%s expense_id=%s", current_user.id, row.id)
    return row


@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    return get_owned_expense(db, expense_id, current_user.id)


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: str,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    """
    Actualiza un gasto del usuario. Se tocan solo los campos presentes en
    el body; un null explícito limpia los campos opcionales.
    """
    row = get_owned_expense(db, expense_id, current_user.id)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "amount", "category", "recurrence", "payment_method", "start_date", "is_active"):
        # obligatorios en BD: un null no los borra
        if field in changes and changes[field] is None:
            changes.pop(field)

    for field, val in changes.items():
        if field in ("description", "notes", "url"):
            val = clean_optional(val)
        elif field == "currency":
            val = (val or settings.DEFAULT_CURRENCY).upper()
        elif field == "name":
            val = val.strip()
        setattr(row, field, val)

    if row.recurrence == RecurrenceType.monthly:
        row.due_month = None

    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info("[expenses] actualizar user_id=%s expense_id=%s campos=%s", current_user.id, row.id, sorted(changes))
    return row


@router.delete("/{expense_id}", response_model=SuccessOut)
def delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    row = get_owned_expense(db, expense_id, current_user.id)
    db.delete(row)
    db.commit()
    logger.info("[expenses] borrar user_id=%s expense_id=%s", current_user.id, expense_id)
    return SuccessOut()
