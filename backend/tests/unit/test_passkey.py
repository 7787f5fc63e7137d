"""
口令登录单元测试
"""

import uuid
from datetime import datetime, timedelta, timezone

from conftest import FakeRepository, FakeResponse
from conftest import make_client as _client

from bizdesk.auth import PasskeyGate, PasskeyValidator

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


class TestPasskeyValidator:
    """服务端校验规则"""

    def _validator(self, **kwargs) -> PasskeyValidator:
        rows = [
            {"id": "1", "passkey": "open-sesame", "is_active": True},
            {"id": "2", "passkey": "retired", "is_active": False},
        ]
        return PasskeyValidator(FakeRepository(rows=rows, **kwargs))

    def test_validate_active_passkey(self):
        result = self._validator().validate("open-sesame", now=NOW)

        assert result.status == 200
        assert result.valid
        assert uuid.UUID(result.session_token).version == 4
        assert result.expires_at == NOW + timedelta(hours=24)

    def test_validate_unknown_passkey(self):
        result = self._validator().validate("guess")
        assert (result.status, result.valid, result.message) == (401, False, "Invalid passkey")

    def test_inactive_passkey_rejected(self):
        assert self._validator().validate("retired").status == 401

    def test_missing_passkey(self):
        result = self._validator().validate("")
        assert (result.status, result.message) == (400, "Invalid request")

    def test_backend_error(self):
        result = self._validator(error="connection refused").validate("open-sesame")
        assert (result.status, result.message) == (500, "Server error")

    def test_response_body(self):
        body = self._validator().validate("open-sesame", now=NOW).to_response()
        assert set(body) == {"valid", "message", "sessionToken", "expiresAt"}
        assert "status" not in self._validator().validate("guess").to_response()


class TestPasskeyGate:
    """客户端口令门"""

    def test_login_stores_session(self):
        client, session = _client(
            FakeResponse(200, {
                "valid": True,
                "message": "Login successful",
                "sessionToken": "tok-1",
                "expiresAt": "2026-10-19T09:00:00+00:00",
            })
        )
        gate = PasskeyGate(client)

        result = gate.login("open-sesame")

        assert result.valid
        assert session.requests[0]["json"] == {"passkey": "open-sesame"}
        assert session.requests[0]["url"].endswith("/functions/v1/validate-passkey")
        assert gate.session.token == "tok-1"
        assert gate.is_authenticated(NOW)

    def test_gate_session_expiry(self):
        client, _ = _client(
            FakeResponse(200, {
                "valid": True,
                "message": "Login successful",
                "sessionToken": "tok-1",
                "expiresAt": "2026-10-19T09:00:00+00:00",
            })
        )
        gate = PasskeyGate(client)
        gate.login("open-sesame")

        assert not gate.is_authenticated(NOW + timedelta(hours=25))
        gate.logout()
        assert not gate.is_authenticated(NOW)

    def test_login_rejected(self):
        client, _ = _client(FakeResponse(401, {"valid": False, "message": "Invalid passkey"}))
        gate = PasskeyGate(client)

        result = gate.login("guess")

        assert not result.valid
        assert result.message == "Invalid passkey"
        assert gate.session is None
