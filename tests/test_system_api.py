"""
Test service info, health and unknown routes.
"""
from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Test health and status endpoints."""

    def test_root(self, client):
        """Test GET /"""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Servidor de Hojas de Vida API funcionando correctamente"
        assert data["version"] == "1.0.0"
        assert data["timestamp"]

    def test_health(self, client):
        """Test GET /health"""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["uptime"] >= 0
        assert data["env"] == "test"


class TestUnknownRoutes:
    """Test the 404 envelope."""

    def test_unknown_route_lists_available_routes(self, client):
        response = client.get("/api/inexistente")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Ruta /api/inexistente no encontrada"
        assert "POST /api/upload" in data["availableRoutes"]
        assert "GET /api/user/documents/:id" in data["availableRoutes"]


class TestUnhandledErrors:
    """Test the catch-all handler."""

    def test_unexpected_exception(self, app, repository, monkeypatch):
        async def broken():
            raise RuntimeError("boom")

        monkeypatch.setattr(repository, "list_all", broken)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/user")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Error interno del servidor",
            "error": "boom",
        }
