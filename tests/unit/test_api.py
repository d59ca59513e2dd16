"""Unit tests for the HTTP transport."""

from unittest.mock import MagicMock

import pytest

from command_relay.api.dependencies import get_control_plane, set_sweeper_instance


def _register(client, device_id="PCAB12345"):
    return client.post("/webhook/register", json={"content": f"REGISTRATION:{device_id}"})


class TestRegistrationEndpoint:
    """Test POST /webhook/register."""

    def test_register_success(self, test_app):
        """Test a valid registration is accepted."""
        response = _register(test_app)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["device_id"] == "PCAB12345"

    @pytest.mark.parametrize(
        "payload",
        [
            {"content": "REGISTRATION:XX123456"},
            {"content": "PCAB12345"},
            {"content": "REGISTRATION:PC1"},
            {},
        ],
    )
    def test_register_invalid(self, test_app, payload):
        """Test malformed registrations return 400."""
        response = test_app.post("/webhook/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid")

    def test_register_invalid_body(self, test_app):
        """Test a non-string content field fails validation."""
        response = test_app.post("/webhook/register", json={"content": {"a": 1}})
        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"


class TestDeviceEndpoints:
    """Test device listing and status."""

    def test_list_devices(self, test_app):
        """Test registered devices are listed."""
        _register(test_app, "PC000001")
        _register(test_app, "PC000002")

        response = test_app.get("/api/v1/devices")
        assert response.status_code == 200
        body = response.json()
        assert sorted(body["devices"]) == ["PC000001", "PC000002"]
        assert body["total"] == 2

    def test_list_devices_empty(self, test_app):
        """Test the list is empty before any registration."""
        assert test_app.get("/api/v1/devices").json() == {"devices": [], "total": 0}

    def test_status_online(self, test_app):
        """Test status of a fresh registration."""
        _register(test_app)
        response = test_app.get("/api/v1/devices/PCAB12345/status")
        assert response.status_code == 200
        body = response.json()
        assert body["found"] is True
        assert body["status"] == "online"
        assert body["last_seen"].startswith("2024-01-01T12:00:00")

    def test_status_offline(self, test_app, clock):
        """Test status after the online window has elapsed."""
        _register(test_app)
        clock.advance(301)
        assert test_app.get("/api/v1/devices/PCAB12345/status").json()["status"] == "offline"

    def test_status_not_found(self, test_app):
        """Test status of an unknown device returns 404."""
        response = test_app.get("/api/v1/devices/PCAB12345/status")
        assert response.status_code == 404
        assert response.json() == {"error": "Device not found: PCAB12345", "detail": None}


class TestCommandEndpoints:
    """Test enqueue and poll."""

    def test_enqueue_and_poll(self, test_app):
        """Test queued commands are delivered once, in order."""
        _register(test_app)
        ids = []
        for command in ("shutdown", {"op": "restart", "delay": 5}):
            response = test_app.post(
                "/api/v1/commands", json={"device_id": "PCAB12345", "command": command}
            )
            assert response.status_code == 200
            assert response.json()["success"] is True
            ids.append(response.json()["command_id"])

        response = test_app.get("/api/v1/devices/PCAB12345/commands")
        assert response.status_code == 200
        commands = response.json()["commands"]
        assert [c["id"] for c in commands] == ids
        assert commands[0]["command"] == "shutdown"
        assert commands[1]["command"] == {"op": "restart", "delay": 5}
        assert "enqueued_at" in commands[0]

        assert test_app.get("/api/v1/devices/PCAB12345/commands").json() == {"commands": []}

    def test_enqueue_unknown_device(self, test_app):
        """Test enqueue for an unregistered device returns 404."""
        response = test_app.post(
            "/api/v1/commands", json={"device_id": "PCAB12345", "command": "shutdown"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Device not found: PCAB12345"

    def test_enqueue_missing_fields(self, test_app):
        """Test enqueue without a device id fails validation."""
        response = test_app.post("/api/v1/commands", json={"command": "shutdown"})
        assert response.status_code == 422

    def test_poll_unknown_device(self, test_app):
        """Test polling an unknown device returns an empty list."""
        response = test_app.get("/api/v1/devices/PCAB12345/commands")
        assert response.status_code == 200
        assert response.json() == {"commands": []}

    def test_poll_refreshes_status(self, test_app, clock):
        """Test polling brings an offline device back online."""
        _register(test_app)
        clock.advance(900)
        test_app.get("/api/v1/devices/PCAB12345/commands")
        assert test_app.get("/api/v1/devices/PCAB12345/status").json()["status"] == "online"


class TestHealthEndpoint:
    """Test GET /api/v1/health."""

    def test_health_without_sweeper(self, test_app):
        """Test health reports degraded when the sweeper is not running."""
        _register(test_app)
        response = test_app.get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["devices_registered"] == 1
        assert body["devices_online"] == 1
        assert body["commands_pending"] == 0
        assert body["sweeper_running"] is False

    def test_health_with_sweeper(self, test_app):
        """Test health reports healthy while the sweeper runs."""
        sweeper = MagicMock()
        sweeper.running = True
        set_sweeper_instance(sweeper)

        body = test_app.get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["sweeper_running"] is True


class TestDependencies:
    """Test dependency wiring."""

    def test_get_control_plane_uninitialized(self):
        """Test accessing the control plane before startup fails loudly."""
        with pytest.raises(RuntimeError):
            get_control_plane()


class TestOpenAPI:
    """Test the published API description."""

    def test_description_maps_legacy_paths(self, test_app):
        """Test the legacy endpoint paths are listed with their replacements."""
        description = test_app.get("/openapi.json").json()["info"]["description"]
        assert "/api/poll-commands/{deviceCode}" in description
        assert "/api/v1/devices/{device_id}/commands" in description
        assert "/api/send-command" in description

    def test_error_responses_documented(self, test_app):
        """Test error responses reference the shared error model."""
        paths = test_app.get("/openapi.json").json()["paths"]
        not_found = paths["/api/v1/commands"]["post"]["responses"]["404"]
        assert not_found["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
        assert "400" in paths["/webhook/register"]["post"]["responses"]
