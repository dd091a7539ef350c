# tests/test_dashboard.py
"""
Dashboard: bloques de gastos, libro de cuentas y préstamos.
"""

from datetime import datetime, timezone

from tests.conftest import API, add_transaction, create_expense, create_loan, create_person


class TestDashboard:
    def test_vacio(self, client):
        body = client.get(f"{API}/dashboard").json()
        assert body["expenses"]["monthly"] == {"total": "0.00", "count": 0}
        assert body["expenses"]["yearly"] == {"total": "0.00", "count": 0, "asMonthly": "0.00"}
        assert body["expenses"]["effectiveMonthly"] == "0.00"
        assert body["ledger"] == {
            "theyOweMe": "0.00",
            "iOweThem": "0.00",
            "netBalance": "0.00",
            "peopleWithBalance": 0,
        }
        assert body["loans"]["activeLoansCount"] == 0

    def test_bloque_gastos(self, client):
        today = datetime.now(timezone.utc).date()
        create_expense(client, name="Hoy", amount="50.00", dueDay=today.day)
        create_expense(client, name="Seguro", amount="120.00", recurrence="yearly", dueMonth=today.month, dueDay=None)
        inactive = create_expense(client, name="Inactivo", amount="999.00")
        client.put(f"{API}/expenses/{inactive['id']}", json={"isActive": False})

        expenses = client.get(f"{API}/dashboard").json()["expenses"]
        assert expenses["monthly"] == {"total": "50.00", "count": 1}
        assert expenses["yearly"] == {"total": "120.00", "count": 1, "asMonthly": "10.00"}
        assert expenses["effectiveMonthly"] == "60.00"
        assert [e["name"] for e in expenses["upcoming"]["monthly"]] == ["Hoy"]
        assert [e["name"] for e in expenses["upcoming"]["yearly"]] == ["Seguro"]

    def test_bloque_ledger(self, client):
        ana = create_person(client, "Ana")["id"]
        beto = create_person(client, "Beto")["id"]
        create_person(client, "Caio")
        add_transaction(client, ana, "lent", "100.00")
        add_transaction(client, beto, "received", "30.00")

        ledger = client.get(f"{API}/dashboard").json()["ledger"]
        assert ledger == {
            "theyOweMe": "100.00",
            "iOweThem": "30.00",
            "netBalance": "70.00",
            "peopleWithBalance": 2,
        }

    def test_bloque_prestamos(self, client):
        ana = create_person(client, "Ana")["id"]
        lent = create_loan(client, personId=ana, amount="200.00")
        create_loan(client, personId=ana, direction="borrowed", amount="80.00")
        settled = create_loan(client, personName="Beto", amount="50.00")

        client.post(f"{API}/loans/{lent['id']}/payments", json={"amount": "50.00", "paidAt": "2024-03-01T10:00:00Z"})
        client.post(f"{API}/loans/{settled['id']}/payments", json={"amount": "50.00", "paidAt": "2024-03-01T10:00:00Z"})

        loans = client.get(f"{API}/dashboard").json()["loans"]
        assert loans == {
            "lentOutstanding": "150.00",
            "borrowedOutstanding": "80.00",
            "activeLoansCount": 2,
            "peopleWithActiveLoans": 1,
        }

    def test_solo_datos_propios(self, client, other_client):
        pid = create_person(client, "Ana")["id"]
        add_transaction(client, pid, "lent", "100.00")
        create_expense(client)

        body = other_client.get(f"{API}/dashboard").json()
        assert body["ledger"]["netBalance"] == "0.00"
        assert body["expenses"]["monthly"]["count"] == 0
