"""
Utilidades de negocio para GASTOS RECURRENTES.

- Separación mensual / anual.
- Totales exactos (Decimal).
- Equivalente mensual de los anuales (total / 12, a céntimos).
- Próximos vencimientos:
    * mensual: dueDay entre hoy y hoy + ventana (por defecto 7 días),
      SIN saltar de mes (un día 2 visto desde el 29 no cuenta).
    * anual: dueMonth == mes actual, sea cual sea el día.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Tuple

from backend.app.core.constants import RecurrenceType
from backend.app.db.custom_types import CENT, ZERO, Money, to_money

MONTHS_PER_YEAR = Decimal(12)
DEFAULT_UPCOMING_WINDOW_DAYS = 7


def _recurrence(expense) -> str:
    return getattr(expense.recurrence, "value", expense.recurrence)


def split_by_recurrence(expenses: Iterable) -> Tuple[List, List]:
    """
    Devuelve (mensuales, anuales) conservando el orden de entrada.
    """
    monthly, yearly = [], []
    for e in expenses:
        if _recurrence(e) == RecurrenceType.yearly.value:
            yearly.append(e)
        else:
            monthly.append(e)
    return monthly, yearly


def sum_amounts(expenses: Iterable) -> Money:
    return sum((to_money(e.amount) for e in expenses), ZERO)


def yearly_as_monthly(yearly_total: Decimal) -> Money:
    """
    Prorrateo mensual de un total anual, redondeado a céntimos (HALF_UP).
    Mismo input -> mismo Decimal, sin deriva.
    """
    return (to_money(yearly_total) / MONTHS_PER_YEAR).quantize(CENT, rounding=ROUND_HALF_UP)


def effective_monthly(monthly_total: Decimal, yearly_total: Decimal) -> Money:
    return to_money(monthly_total) + yearly_as_monthly(yearly_total)


def is_upcoming_monthly(expense, today: date, window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS) -> bool:
    if not expense.due_day:
        return False
    days_until_due = expense.due_day - today.day
    return 0 <= days_until_due <= window_days


def is_upcoming_yearly(expense, today: date) -> bool:
    return expense.due_month == today.month


def project_expenses(
    expenses: Iterable,
    today: date,
    *,
    window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS,
) -> dict:
    """
    Resumen de gastos recurrentes para una fecha "hoy":

    {
      "monthly": [...], "yearly": [...],
      "monthly_total", "yearly_total", "yearly_as_monthly", "effective_monthly",
      "upcoming_monthly": [...], "upcoming_yearly": [...],
    }
    """
    monthly, yearly = split_by_recurrence(expenses)
    monthly_total = sum_amounts(monthly)
    yearly_total = sum_amounts(yearly)

    return {
        "monthly": monthly,
        "yearly": yearly,
        "monthly_total": monthly_total,
        "yearly_total": yearly_total,
        "yearly_as_monthly": yearly_as_monthly(yearly_total),
        "effective_monthly": effective_monthly(monthly_total, yearly_total),
        "upcoming_monthly": [e for e in monthly if is_upcoming_monthly(e, today, window_days)],
        "upcoming_yearly": [e for e in yearly if is_upcoming_yearly(e, today)],
    }
