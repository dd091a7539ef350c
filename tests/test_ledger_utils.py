# tests/test_ledger_utils.py
"""
Tests de las funciones puras del libro de cuentas y de préstamos.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from backend.app.core.constants import (
    BALANCE_I_OWE_THEM,
    BALANCE_SETTLED,
    BALANCE_THEY_OWE_ME,
    LoanDirection,
    TransactionType,
)
from backend.app.utils.ledger_utils import (
    aggregate_totals,
    apply_settlement,
    balance_direction,
    is_fully_paid,
    loan_remaining,
    loan_total_paid,
    person_balance,
    signed_loan_remaining,
    signed_transaction_amount,
)


def tx(type_, amount, disregarded=False):
    return SimpleNamespace(type=type_, amount=Decimal(amount), disregarded=disregarded)


def loan(amount, payments=(), direction=LoanDirection.lent, is_settled=False):
    return SimpleNamespace(
        amount=Decimal(amount),
        payments=[SimpleNamespace(amount=Decimal(p)) for p in payments],
        direction=direction,
        is_settled=is_settled,
    )


class TestPersonBalance:
    def test_signo_por_tipo(self):
        assert signed_transaction_amount(tx(TransactionType.lent, "10.00")) == Decimal("10.00")
        assert signed_transaction_amount(tx(TransactionType.received, "10.00")) == Decimal("-10.00")

    def test_acepta_valores_string(self):
        """Funciona igual con el valor crudo del enumerado."""
        assert signed_transaction_amount(tx("received", "5.50")) == Decimal("-5.50")

    def test_tipo_desconocido(self):
        with pytest.raises(ValueError):
            signed_transaction_amount(tx("gift", "1.00"))

    def test_sin_transacciones_es_cero(self):
        balance = person_balance([])
        assert balance == Decimal("0.00")
        assert str(balance) == "0.00"

    def test_secuencia_lent_received(self):
        txs = [
            tx(TransactionType.lent, "100.00"),
            tx(TransactionType.received, "40.00"),
            tx(TransactionType.received, "100.00"),
        ]
        assert person_balance(txs) == Decimal("-40.00")

    def test_descartar_quita_exactamente_una_contribucion(self):
        txs = [
            tx(TransactionType.lent, "100.00"),
            tx(TransactionType.received, "40.00"),
            tx(TransactionType.received, "100.00"),
        ]
        before = person_balance(txs)
        txs[2].disregarded = True
        assert person_balance(txs) == before + Decimal("100.00")
        assert person_balance(txs) == Decimal("60.00")

    def test_orden_no_importa(self):
        txs = [
            tx(TransactionType.lent, "0.10"),
            tx(TransactionType.lent, "0.20"),
            tx(TransactionType.received, "0.30"),
        ]
        assert person_balance(txs) == person_balance(list(reversed(txs))) == Decimal("0.00")

    def test_direccion(self):
        assert balance_direction(Decimal("1.00")) == BALANCE_THEY_OWE_ME
        assert balance_direction(Decimal("-0.01")) == BALANCE_I_OWE_THEM
        assert balance_direction(Decimal("0.00")) == BALANCE_SETTLED


class TestLoanMath:
    def test_total_pagado_y_pendiente(self):
        l = loan("200.00", ["50.00", "25.50"])
        assert loan_total_paid(l.payments) == Decimal("75.50")
        assert loan_remaining(l) == Decimal("124.50")

    def test_sobrepago_pendiente_es_cero(self):
        l = loan("100.00", ["80.00", "50.00"])
        assert loan_remaining(l) == Decimal("0.00")
        assert is_fully_paid(l)

    def test_liquida_con_pago_exacto(self):
        l = loan("200.00", ["200.00"])
        assert apply_settlement(l) is True
        assert l.is_settled is True

    def test_pago_parcial_no_liquida(self):
        l = loan("200.00", ["199.99"])
        assert apply_settlement(l) is False
        assert l.is_settled is False

    def test_liquidacion_es_de_un_solo_sentido(self):
        """Ya liquidado: nunca vuelve a abierto aunque los pagos no cubran."""
        l = loan("500.00", ["10.00"], is_settled=True)
        assert apply_settlement(l) is False
        assert l.is_settled is True

    def test_pendiente_con_signo(self):
        assert signed_loan_remaining(loan("100.00", ["30.00"])) == Decimal("70.00")
        assert signed_loan_remaining(
            loan("100.00", ["30.00"], direction=LoanDirection.borrowed)
        ) == Decimal("-70.00")
        assert signed_loan_remaining(loan("100.00", [], is_settled=True)) == Decimal("0.00")


class TestAggregateTotals:
    def test_totales(self):
        totals = aggregate_totals([Decimal("100.00"), Decimal("-40.00"), Decimal("0.00"), Decimal("15.50")])
        assert totals == {
            "they_owe_me": Decimal("115.50"),
            "i_owe_them": Decimal("40.00"),
            "net_balance": Decimal("75.50"),
        }

    def test_vacio(self):
        totals = aggregate_totals([])
        assert totals["net_balance"] == Decimal("0.00")
