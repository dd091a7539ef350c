# tests/test_expenses.py
"""
Gastos recurrentes: CRUD, agrupación y totales.
"""

from tests.conftest import API, create_expense


class TestExpensesCrud:
    def test_crear(self, client):
        exp = create_expense(client)
        assert exp["id"].startswith("exp_")
        assert exp["amount"] == "39.90"
        assert exp["currency"] == "BRL"
        assert exp["isActive"] is True
        assert exp["recurrence"] == "monthly"

    def test_mensual_ignora_due_month(self, client):
        exp = create_expense(client, dueMonth=3)
        assert exp["dueMonth"] is None

    def test_anual_conserva_due_month(self, client):
        exp = create_expense(client, name="IPVA", amount="1200.00", recurrence="yearly", dueMonth=3, dueDay=None)
        assert exp["dueMonth"] == 3

    def test_validaciones_400(self, client):
        base = {
            "name": "X",
            "amount": "10.00",
            "recurrence": "monthly",
            "paymentMethod": "pix",
            "startDate": "2024-01-01T00:00:00Z",
        }
        assert client.post(f"{API}/expenses", json={**base, "amount": "0"}).status_code == 400
        assert client.post(f"{API}/expenses", json={**base, "dueDay": 32}).status_code == 400
        assert client.post(f"{API}/expenses", json={**base, "recurrence": "weekly"}).status_code == 400
        assert client.post(f"{API}/expenses", json={**base, "paymentMethod": "cheque"}).status_code == 400
        assert client.post(f"{API}/expenses", json={**base, "name": "   "}).status_code == 400
        body = client.post(f"{API}/expenses", json={**base, "name": ""}).json()
        assert "detail" in body and "errors" in body

    def test_actualizar_y_desactivar(self, client):
        exp = create_expense(client, notes="plan familia")
        resp = client.put(
            f"{API}/expenses/{exp['id']}",
            json={"amount": "44.90", "isActive": False, "notes": None},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["amount"] == "44.90"
        assert body["isActive"] is False
        assert body["notes"] is None
        assert body["name"] == "Netflix"

    def test_nombre_en_blanco_en_update_400(self, client):
        exp = create_expense(client)
        assert client.put(f"{API}/expenses/{exp['id']}", json={"name": "  "}).status_code == 400
        assert client.get(f"{API}/expenses/{exp['id']}").json()["name"] == "Netflix"

    def test_pasar_a_mensual_limpia_due_month(self, client):
        exp = create_expense(client, recurrence="yearly", dueMonth=7)
        body = client.put(f"{API}/expenses/{exp['id']}", json={"recurrence": "monthly"}).json()
        assert body["dueMonth"] is None

    def test_borrar(self, client):
        exp = create_expense(client)
        assert client.delete(f"{API}/expenses/{exp['id']}").json() == {"success": True}
        assert client.get(f"{API}/expenses/{exp['id']}").status_code == 404


class TestExpensesList:
    def test_agrupado_y_totales(self, client):
        create_expense(client, name="Internet", amount="100.00", dueDay=15)
        create_expense(client, name="Netflix", amount="39.90", dueDay=5)
        create_expense(client, name="Seguro", amount="1200.00", recurrence="yearly", dueMonth=8, dueDay=None)

        body = client.get(f"{API}/expenses").json()
        assert [e["name"] for e in body["expenses"]["monthly"]] == ["Netflix", "Internet"]
        assert [e["name"] for e in body["expenses"]["yearly"]] == ["Seguro"]
        assert body["totals"] == {
            "monthly": "139.90",
            "yearly": "1200.00",
            "yearlyAsMonthly": "100.00",
            "effectiveMonthly": "239.90",
        }

    def test_filtros(self, client):
        create_expense(client, name="Activo")
        inactive = create_expense(client, name="Inactivo")
        client.put(f"{API}/expenses/{inactive['id']}", json={"isActive": False})
        create_expense(client, name="Anual", recurrence="yearly", dueMonth=1)

        active = client.get(f"{API}/expenses", params={"active": "true"}).json()
        names = [e["name"] for e in active["expenses"]["monthly"] + active["expenses"]["yearly"]]
        assert sorted(names) == ["Activo", "Anual"]

        yearly = client.get(f"{API}/expenses", params={"recurrence": "yearly"}).json()
        assert yearly["expenses"]["monthly"] == []
        assert [e["name"] for e in yearly["expenses"]["yearly"]] == ["Anual"]
