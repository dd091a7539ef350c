# ============================================================
# Modelos SQLAlchemy
# - Cadena de propiedad: User -> Person -> Transaction / Loan -> LoanPayment
# - User -> RecurringExpense
# - Todas las FKs hacia el padre llevan ON DELETE CASCADE: borrar una
#   persona borra todo su historial en la misma sentencia.
# - Importes en NUMERIC(10, 2) (Decimal en Python, nunca float).
# ============================================================

from sqlalchemy import (
    Column, String, Integer, Boolean, Text,
    DateTime, ForeignKey, CheckConstraint, Numeric, Index,
    Enum as SAEnum, text,
)
import sqlalchemy as sa
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from backend.app.db.base import Base
from backend.app.core.constants import (
    ExpenseCategory,
    LoanDirection,
    PaymentMethod,
    RecurrenceType,
    TransactionType,
)
from backend.app.utils.id_utils import (
    generate_expense_id,
    generate_loan_id,
    generate_loan_payment_id,
    generate_person_id,
    generate_transaction_id,
    generate_user_id,
)

# Tipo compartido por gastos y pagos de préstamo (un único tipo en Postgres)
payment_method_enum = SAEnum(PaymentMethod, name="payment_method")


# =============================================
# 1. USUARIOS
# =============================================
class User(Base):
    __tablename__ = "users"

    id         = Column(String, primary_key=True, default=generate_user_id)
    username   = Column(String, unique=True, index=True, nullable=False)
    # PIN corto: disuasorio en dispositivo compartido, no es una credencial fuerte
    pin        = Column(String(4), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones con las entidades que "pertenecen" a un usuario
    people             = relationship("Person", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    recurring_expenses = relationship("RecurringExpense", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


# =============================================
# 2. GASTOS RECURRENTES
# =============================================
class RecurringExpense(Base):
    __tablename__ = "recurring_expenses"
    __table_args__ = (
        CheckConstraint("due_day IS NULL OR (due_day BETWEEN 1 AND 31)", name="ck_expense_due_day"),
        CheckConstraint("due_month IS NULL OR (due_month BETWEEN 1 AND 12)", name="ck_expense_due_month"),
        CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
    )

    id             = Column(String, primary_key=True, default=generate_expense_id)
    user_id        = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name           = Column(String, nullable=False)
    description    = Column(Text)
    amount         = Column(Numeric(10, 2), nullable=False)
    currency       = Column(String, nullable=False, server_default=text("'BRL'"))

    category       = Column(SAEnum(ExpenseCategory, name="expense_category"), nullable=False, server_default="other")
    recurrence     = Column(SAEnum(RecurrenceType, name="recurrence_type"), nullable=False, index=True)
    payment_method = Column(payment_method_enum, nullable=False)

    due_day        = Column(Integer)   # 1..31
    due_month      = Column(Integer)   # 1..12, solo para anuales

    start_date     = Column(DateTime(timezone=True), nullable=False)
    end_date       = Column(DateTime(timezone=True))
    is_active      = Column(Boolean, nullable=False, default=True, server_default=text("true"), index=True)

    notes          = Column(Text)
    url            = Column(String)

    created_at     = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at     = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="recurring_expenses")


# =============================================
# 3. PERSONAS
# =============================================
class Person(Base):
    __tablename__ = "people"

    id           = Column(String, primary_key=True, default=generate_person_id)
    user_id      = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name         = Column(String, nullable=False)
    nickname     = Column(String)
    email        = Column(String)
    phone        = Column(String)
    relationship = Column(String)   # "amigo de la facultad", "primo"...
    notes        = Column(Text)

    created_at   = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at   = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # `relationship` es columna aquí: usamos sa.orm.relationship
    user         = sa.orm.relationship("User", back_populates="people")
    transactions = sa.orm.relationship(
        "Transaction",
        back_populates="person",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Transaction.date.desc()",
    )
    loans        = sa.orm.relationship(
        "Loan",
        back_populates="person",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Loan.transaction_date.desc()",
    )


# =============================================
# 4. LIBRO DE CUENTAS (modelo unificado)
# =============================================
class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        Index("ix_transactions_person_date", "person_id", "date"),
    )

    id          = Column(String, primary_key=True, default=generate_transaction_id)
    person_id   = Column(String, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)

    type        = Column(SAEnum(TransactionType, name="transaction_type"), nullable=False)
    amount      = Column(Numeric(10, 2), nullable=False)
    date        = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text)
    # Excluida del saldo sin borrarla (se conserva el historial)
    disregarded = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    created_at  = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    person = relationship("Person", back_populates="transactions")


# =============================================
# 5. PRÉSTAMOS + PAGOS
# =============================================
class Loan(Base):
    __tablename__ = "loans"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_loan_amount_positive"),
    )

    id                  = Column(String, primary_key=True, default=generate_loan_id)
    person_id           = Column(String, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)

    direction           = Column(SAEnum(LoanDirection, name="loan_direction"), nullable=False)
    amount              = Column(Numeric(10, 2), nullable=False)
    currency            = Column(String, nullable=False, server_default=text("'BRL'"))
    reason              = Column(String, nullable=False)

    transaction_date    = Column(DateTime(timezone=True), nullable=False)
    expected_settlement = Column(DateTime(timezone=True))

    # Transición única open -> settled; solo la toca el servidor
    is_settled          = Column(Boolean, nullable=False, default=False, server_default=text("false"), index=True)

    notes               = Column(Text)

    created_at          = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at          = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    person   = relationship("Person", back_populates="loans")
    payments = relationship(
        "LoanPayment",
        back_populates="loan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LoanPayment.paid_at.desc()",
    )


class LoanPayment(Base):
    __tablename__ = "loan_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_loan_payment_amount_positive"),
    )

    id         = Column(String, primary_key=True, default=generate_loan_payment_id)
    loan_id    = Column(String, ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True)

    amount     = Column(Numeric(10, 2), nullable=False)
    paid_at    = Column(DateTime(timezone=True), nullable=False)
    method     = Column(payment_method_enum)
    notes      = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    loan = relationship("Loan", back_populates="payments")
