"""
Utilidades de negocio para el LIBRO DE CUENTAS con personas.

Aquí centralizamos los cálculos de saldo que usan los endpoints:

- Importe con signo de una transacción (lent -> +, received -> -).
- Saldo de una persona a partir de sus transacciones no descartadas.
- Dirección del saldo (me deben / debo / saldado).
- Agregados de préstamos: total pagado, pendiente, liquidación.
- Totales globales del usuario (me deben / debo / neto).

Todo son funciones puras sobre objetos con atributos (modelos SQLAlchemy
o cualquier cosa con la misma forma). No hay saldo acumulado guardado en
BD: se recalcula en cada lectura, siempre con Decimal.

La idea es que los routers se limiten a:
  - Validar inputs
  - Comprobar propiedad
  - Orquestar llamadas a estas funciones
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from backend.app.core.constants import (
    BALANCE_I_OWE_THEM,
    BALANCE_SETTLED,
    BALANCE_THEY_OWE_ME,
    LoanDirection,
    TransactionType,
)
from backend.app.db.custom_types import ZERO, Money, to_money


def _enum_value(v) -> str:
    return getattr(v, "value", v)


# ============================
# Transacciones
# ============================

def signed_transaction_amount(tx) -> Money:
    """
    Importe con signo de una transacción:

    - lent     -> +amount (me deben)
    - received -> -amount (me han devuelto / yo debo)
    """
    amount = to_money(tx.amount)
    if _enum_value(tx.type) == TransactionType.lent.value:
        return amount
    if _enum_value(tx.type) == TransactionType.received.value:
        return -amount
    raise ValueError(f"Tipo de transacción desconocido: {tx.type!r}")


def person_balance(transactions: Iterable) -> Money:
    """
    Saldo de una persona = Σ(lent) − Σ(received), ignorando las
    transacciones con disregarded = True.

    Positivo -> me deben. Negativo -> debo yo.
    El orden de las transacciones no afecta al resultado.
    """
    return sum(
        (signed_transaction_amount(tx) for tx in transactions if not tx.disregarded),
        ZERO,
    )


def balance_direction(balance: Decimal) -> str:
    if balance > 0:
        return BALANCE_THEY_OWE_ME
    if balance < 0:
        return BALANCE_I_OWE_THEM
    return BALANCE_SETTLED


# ============================
# Préstamos
# ============================

def loan_total_paid(payments: Iterable) -> Money:
    return sum((to_money(p.amount) for p in payments), ZERO)


def loan_remaining(loan) -> Money:
    """
    Pendiente = amount − Σ(pagos), con suelo en 0.

    Un sobrepago no genera crédito a favor: el excedente se ignora.
    """
    remaining = to_money(loan.amount) - loan_total_paid(loan.payments)
    return max(remaining, ZERO)


def is_fully_paid(loan) -> bool:
    return loan_total_paid(loan.payments) >= to_money(loan.amount)


def apply_settlement(loan) -> bool:
    """
    Marca el préstamo como liquidado si los pagos cubren el principal.

    Transición única open -> settled: nunca vuelve a False desde aquí.
    Devuelve True si en esta llamada ha pasado a liquidado.
    """
    if loan.is_settled:
        return False
    if is_fully_paid(loan):
        loan.is_settled = True
        return True
    return False


def signed_loan_remaining(loan) -> Money:
    """
    Contribución de un préstamo al saldo:
    - liquidado -> 0
    - lent      -> +pendiente
    - borrowed  -> −pendiente
    """
    if loan.is_settled:
        return ZERO
    remaining = loan_remaining(loan)
    if _enum_value(loan.direction) == LoanDirection.lent.value:
        return remaining
    return -remaining


# ============================
# Totales globales
# ============================

def aggregate_totals(balances: Iterable[Decimal]) -> dict:
    """
    A partir de los saldos de cada persona:

    - they_owe_me: suma de las partes positivas
    - i_owe_them:  suma del valor absoluto de las partes negativas
    - net_balance: they_owe_me − i_owe_them
    """
    they_owe_me = ZERO
    i_owe_them = ZERO
    for b in balances:
        if b > 0:
            they_owe_me += b
        elif b < 0:
            i_owe_them += -b
    return {
        "they_owe_me": they_owe_me,
        "i_owe_them": i_owe_them,
        "net_balance": they_owe_me - i_owe_them,
    }
