# schemas/dashboard.py
from typing import List, Optional

from backend.app.core.constants import PaymentMethod
from backend.app.db.custom_types import Money
from backend.app.schemas.base import ApiModel


class UpcomingExpenseItem(ApiModel):
    id: str
    name: str
    amount: Money
    due_day: Optional[int] = None
    due_month: Optional[int] = None
    payment_method: PaymentMethod


class MonthlyBlock(ApiModel):
    total: Money
    count: int


class YearlyBlock(ApiModel):
    total: Money
    count: int
    as_monthly: Money


class UpcomingBlock(ApiModel):
    monthly: List[UpcomingExpenseItem]
    yearly: List[UpcomingExpenseItem]


class DashboardExpenses(ApiModel):
    monthly: MonthlyBlock
    yearly: YearlyBlock
    effective_monthly: Money
    upcoming: UpcomingBlock


class DashboardLedger(ApiModel):
    they_owe_me: Money
    i_owe_them: Money
    net_balance: Money
    people_with_balance: int


class DashboardLoans(ApiModel):
    lent_outstanding: Money
    borrowed_outstanding: Money
    active_loans_count: int
    people_with_active_loans: int


class DashboardOut(ApiModel):
    expenses: DashboardExpenses
    ledger: DashboardLedger
    loans: DashboardLoans
