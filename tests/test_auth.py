# tests/test_auth.py
"""
Login por PIN: alta automática, PIN incorrecto, sesión y logout.
"""

from tests.conftest import API, login


class TestLogin:
    def test_usuario_nuevo_se_crea(self, anon_client):
        resp = login(anon_client, "  Carla ", "0042")
        assert resp.status_code == 201
        body = resp.json()
        assert body["isNewUser"] is True
        assert body["user"]["username"] == "carla"
        assert body["user"]["id"].startswith("usr_")
        assert "session" in resp.cookies

    def test_usuario_existente_pin_correcto(self, anon_client):
        login(anon_client, "carla", "0042")
        resp = login(anon_client, "CARLA", "0042")
        assert resp.status_code == 200
        assert resp.json()["isNewUser"] is False

    def test_pin_incorrecto_401(self, anon_client):
        login(anon_client, "carla", "0042")
        resp = login(anon_client, "carla", "42")
        assert resp.status_code == 401

    def test_pin_numerico_json(self, anon_client):
        """Un PIN enviado como número se trata como su texto."""
        resp = anon_client.post(f"{API}/auth", json={"username": "eva", "pin": 1234})
        assert resp.status_code == 201
        again = login(anon_client, "eva", "1234")
        assert again.status_code == 200
        assert again.json()["isNewUser"] is False

    def test_pin_numerico_fuera_de_rango_400(self, anon_client):
        resp = anon_client.post(f"{API}/auth", json={"username": "eva", "pin": 12345})
        assert resp.status_code == 400

    def test_pin_no_numerico_400(self, anon_client):
        resp = login(anon_client, "carla", "12a4")
        assert resp.status_code == 400
        assert "PIN" in resp.json()["detail"]

    def test_pin_demasiado_largo_400(self, anon_client):
        assert login(anon_client, "carla", "12345").status_code == 400

    def test_username_vacio_400(self, anon_client):
        assert login(anon_client, "   ", "1234").status_code == 400


class TestSession:
    def test_sin_sesion_devuelve_null(self, anon_client):
        resp = anon_client.get(f"{API}/auth")
        assert resp.status_code == 200
        assert resp.json() == {"user": None}

    def test_sesion_actual(self, client):
        resp = client.get(f"{API}/auth")
        assert resp.json()["user"]["username"] == "ana"

    def test_token_invalido_devuelve_null(self, anon_client):
        anon_client.cookies.set("session", "no-es-un-jwt")
        assert anon_client.get(f"{API}/auth").json() == {"user": None}

    def test_bearer_aceptado(self, anon_client):
        resp = login(anon_client, "dora", "1111")
        token = resp.cookies["session"]
        anon_client.cookies.clear()
        me = anon_client.get(f"{API}/auth", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["user"]["username"] == "dora"

    def test_logout(self, client):
        resp = client.delete(f"{API}/auth")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        client.cookies.clear()
        assert client.get(f"{API}/auth").json() == {"user": None}


class TestRequireUser:
    def test_endpoints_protegidos_401(self, anon_client):
        for path in ("/people", "/loans", "/expenses", "/dashboard"):
            assert anon_client.get(f"{API}{path}").status_code == 401
