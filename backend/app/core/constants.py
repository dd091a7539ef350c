# backend/app/core/constants.py

"""
Constantes de negocio.

Aquí concentramos todos los "strings mágicos" que usamos en varios sitios:
- enumerados cerrados (categorías, métodos de pago, recurrencias)
- tipos de movimiento del libro de cuentas
- direcciones de saldo
"""

from __future__ import annotations

import enum


# ----------------------------
# Gastos recurrentes
# ----------------------------
class RecurrenceType(str, enum.Enum):
    monthly = "monthly"
    yearly = "yearly"


class ExpenseCategory(str, enum.Enum):
    subscription = "subscription"   # Netflix, Spotify...
    utility = "utility"             # luz, agua, internet
    insurance = "insurance"
    rent = "rent"
    loan_payment = "loan_payment"
    membership = "membership"       # gimnasio, clubes
    education = "education"
    transport = "transport"
    other = "other"


class PaymentMethod(str, enum.Enum):
    pix = "pix"
    credit_card = "credit_card"
    debit_card = "debit_card"
    boleto = "boleto"
    automatic_debit = "automatic_debit"
    bank_transfer = "bank_transfer"
    cash = "cash"
    other = "other"


# ----------------------------
# Libro de cuentas con personas
# ----------------------------
class TransactionType(str, enum.Enum):
    lent = "lent"           # yo presto -> me deben
    received = "received"   # me devuelven / recibo -> resta


class LoanDirection(str, enum.Enum):
    lent = "lent"           # yo presté
    borrowed = "borrowed"   # yo pedí prestado


# Dirección del saldo (positivo = me deben)
BALANCE_THEY_OWE_ME = "they_owe_me"
BALANCE_I_OWE_THEM = "i_owe_them"
BALANCE_SETTLED = "settled"


# ----------------------------
# Identidad
# ----------------------------
PIN_PATTERN = r"^\d{1,4}$"
