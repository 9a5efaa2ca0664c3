"""Tests for health and metrics endpoints."""

from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Test suite for health check endpoints."""

    def test_healthz_always_returns_alive(self, client: TestClient):
        """Liveness probe should always return 200."""
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_readyz_ready_after_startup(self, client: TestClient):
        """All components are up once the lifespan has run."""
        response = client.get("/readyz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["components"] == {"store": True, "asr": True, "llm": True}

    def test_health_combined_endpoint(self, client: TestClient, store):
        """Combined health endpoint includes the room count."""
        store.register("room-1")

        response = client.get("/health")
        data = response.json()

        assert data["status"] == "healthy"
        assert data["ready"] is True
        assert data["rooms"] == 1

    def test_health_module_state_management(self):
        """Health module should correctly track component states."""
        from src.api.routes import health

        health.set_component_health("asr", False)
        assert health.get_component_health()["asr"] is False

        health.set_component_health("unknown", True)
        assert "unknown" not in health.get_component_health()

    def test_readyz_503_when_critical_components_down(self, client: TestClient):
        """Readiness should return 503 when a critical component is down."""
        from src.api.routes import health

        health.set_component_health("llm", False)
        try:
            response = client.get("/readyz")
            assert response.status_code == 503
            assert response.json()["status"] == "not_ready"
        finally:
            health.set_component_health("llm", True)


class TestMetricsEndpoint:
    """Tests for /metrics."""

    def test_metrics_exposed(self, client: TestClient):
        """Prometheus text includes relay metrics after an exchange."""
        with client.websocket_connect("/") as ws:
            ws.send_json({"type": "text_message", "roomName": "m1", "message": "hello"})
            ws.receive_json()

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "voicerelay_outcomes_total" in response.text
        assert "voicerelay_rooms_created_total" in response.text

    def test_metrics_disabled(self, make_client, test_settings):
        """Metrics route is absent when disabled."""
        test_settings.metrics_enabled = False

        client = make_client()

        assert client.get("/metrics").status_code == 404
