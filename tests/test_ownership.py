# tests/test_ownership.py
"""
Aislamiento entre usuarios: los datos ajenos responden 404 (nunca 403)
y borrar una persona arrastra todo su historial.
"""

from sqlalchemy import func, select

from backend.app.db import models
from tests.conftest import API, add_transaction, create_expense, create_loan, create_person


class TestOwnershipGuard:
    def test_persona_ajena_404(self, client, other_client):
        pid = create_person(client, "Ana")["id"]
        assert other_client.get(f"{API}/people/{pid}").status_code == 404
        assert other_client.put(f"{API}/people/{pid}", json={"name": "Hack"}).status_code == 404
        assert other_client.delete(f"{API}/people/{pid}").status_code == 404
        assert client.get(f"{API}/people/{pid}").json()["name"] == "Ana"

    def test_transacciones_ajenas_404(self, client, other_client):
        pid = create_person(client, "Ana")["id"]
        tx = add_transaction(client, pid, "lent", "10.00")
        resp = other_client.post(
            f"{API}/people/{pid}/transactions",
            json={"type": "lent", "amount": "1.00", "date": "2024-03-01T12:00:00Z"},
        )
        assert resp.status_code == 404
        resp = other_client.patch(f"{API}/people/{pid}/transactions/{tx['id']}", json={"disregarded": True})
        assert resp.status_code == 404

    def test_prestamos_ajenos_404(self, client, other_client):
        loan = create_loan(client, personName="Ana")
        lid = loan["id"]
        assert other_client.get(f"{API}/loans/{lid}").status_code == 404
        assert other_client.put(f"{API}/loans/{lid}", json={"reason": "x"}).status_code == 404
        assert other_client.delete(f"{API}/loans/{lid}").status_code == 404
        assert other_client.get(f"{API}/loans/{lid}/payments").status_code == 404
        resp = other_client.post(
            f"{API}/loans/{lid}/payments",
            json={"amount": "200.00", "paidAt": "2024-03-01T10:00:00Z"},
        )
        assert resp.status_code == 404
        assert client.get(f"{API}/loans/{lid}").json()["isSettled"] is False

    def test_prestamo_con_persona_ajena_404(self, client, other_client):
        pid = create_person(client, "Ana")["id"]
        resp = other_client.post(
            f"{API}/loans",
            json={"personId": pid, "direction": "lent", "amount": "10.00", "reason": "x", "transactionDate": "2024-02-01T10:00:00Z"},
        )
        assert resp.status_code == 404

    def test_gastos_ajenos_404(self, client, other_client):
        eid = create_expense(client)["id"]
        assert other_client.get(f"{API}/expenses/{eid}").status_code == 404
        assert other_client.put(f"{API}/expenses/{eid}", json={"amount": "1.00"}).status_code == 404
        assert other_client.delete(f"{API}/expenses/{eid}").status_code == 404

    def test_listados_solo_propios(self, client, other_client):
        create_person(client, "Ana")
        create_loan(client, personName="Beto")
        create_expense(client)
        assert other_client.get(f"{API}/people").json()["people"] == []
        assert other_client.get(f"{API}/loans").json() == []
        body = other_client.get(f"{API}/expenses").json()
        assert body["expenses"] == {"monthly": [], "yearly": []}


class TestCascade:
    def test_borrar_persona_borra_historial(self, client, db_session):
        pid = create_person(client, "Ana")["id"]
        add_transaction(client, pid, "lent", "10.00")
        loan = create_loan(client, personId=pid)
        client.post(f"{API}/loans/{loan['id']}/payments", json={"amount": "5.00", "paidAt": "2024-03-01T10:00:00Z"})

        assert client.delete(f"{API}/people/{pid}").status_code == 200

        for model in (models.Person, models.Transaction, models.Loan, models.LoanPayment):
            count = db_session.execute(select(func.count()).select_from(model)).scalar_one()
            assert count == 0, model.__tablename__
