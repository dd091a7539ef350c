# backend/app/api/v1/dashboard_router.py

"""
Router de DASHBOARD: resumen de solo lectura del usuario autenticado.

GET /api/v1/dashboard devuelve tres bloques:

- expenses: totales mensual/anual de gastos ACTIVOS, equivalente mensual
  efectivo y próximos vencimientos.
- ledger: me deben / debo / neto a partir de los saldos por persona.
- loans: pendiente prestado / pendiente pedido de préstamos abiertos.

Todo se recalcula en cada petición; no hay agregados guardados.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from backend.app.api.v1.auth_router import require_user
from backend.app.core.config import settings
from backend.app.db import models
from backend.app.db.custom_types import ZERO
from backend.app.db.session import get_db
from backend.app.schemas.dashboard import (
    DashboardExpenses,
    DashboardLedger,
    DashboardLoans,
    DashboardOut,
    MonthlyBlock,
    UpcomingBlock,
    UpcomingExpenseItem,
    YearlyBlock,
)
from backend.app.utils.expense_utils import project_expenses
from backend.app.utils.ledger_utils import aggregate_totals, person_balance, signed_loan_remaining

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ============================
# Bloques
# ============================

def _expenses_block(db: Session, user_id: str) -> DashboardExpenses:
    stmt = (
        select(models.RecurringExpense)
        .where(
            models.RecurringExpense.user_id == user_id,
            models.RecurringExpense.is_active.is_(True),
        )
        .order_by(
            models.RecurringExpense.due_day.is_(None),
            models.RecurringExpense.due_day.asc(),
        )
    )
    rows = db.execute(stmt).scalars().all()
    summary = project_expenses(
        rows,
        datetime.now(timezone.utc).date(),
        window_days=settings.UPCOMING_WINDOW_DAYS,
    )

    return DashboardExpenses(
        monthly=MonthlyBlock(total=summary["monthly_total"], count=len(summary["monthly"])),
        yearly=YearlyBlock(
            total=summary["yearly_total"],
            count=len(summary["yearly"]),
            as_monthly=summary["yearly_as_monthly"],
        ),
        effective_monthly=summary["effective_monthly"],
        upcoming=UpcomingBlock(
            monthly=[UpcomingExpenseItem.model_validate(e) for e in summary["upcoming_monthly"]],
            yearly=[UpcomingExpenseItem.model_validate(e) for e in summary["upcoming_yearly"]],
        ),
    )


def _ledger_block(db: Session, user_id: str) -> DashboardLedger:
    stmt = (
        select(models.Person)
        .where(models.Person.user_id == user_id)
        .options(selectinload(models.Person.transactions))
    )
    balances = [person_balance(p.transactions) for p in db.execute(stmt).scalars().all()]
    totals = aggregate_totals(balances)
    return DashboardLedger(
        **totals,
        people_with_balance=sum(1 for b in balances if b != 0),
    )


def _loans_block(db: Session, user_id: str) -> DashboardLoans:
    stmt = (
        select(models.Loan)
        .join(models.Person, models.Person.id == models.Loan.person_id)
        .where(models.Person.user_id == user_id, models.Loan.is_settled.is_(False))
        .options(selectinload(models.Loan.payments))
    )
    loans = db.execute(stmt).scalars().all()

    lent = ZERO
    borrowed = ZERO
    for loan in loans:
        signed = signed_loan_remaining(loan)
        if signed > 0:
            lent += signed
        elif signed < 0:
            borrowed -= signed

    return DashboardLoans(
        lent_outstanding=lent,
        borrowed_outstanding=borrowed,
        active_loans_count=len(loans),
        people_with_active_loans=len({loan.person_id for loan in loans}),
    )


# ============================
# Endpoint
# ============================

@router.get("", response_model=DashboardOut)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_user),
):
    out = DashboardOut(
        expenses=_expenses_block(db, current_user.id),
        ledger=_ledger_block(db, current_user.id),
        loans=_loans_block(db, current_user.id),
    )
    logger.info(
        "[dashboard] user_id=%s net=%s effective_monthly=%s",
        current_user.id, out.ledger.net_balance, out.expenses.effective_monthly,
    )
    return out
