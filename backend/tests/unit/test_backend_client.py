"""
托管后端访问单元测试（客户端/仓储/对象存储/当前用户）
"""

import pytest
import requests

from conftest import FakeResponse
from conftest import make_client as _client

from bizdesk.auth import SupabaseAuth
from bizdesk.config.runtime_config import BackendConfig
from bizdesk.data import SupabaseClient, SupabaseRepository
from bizdesk.interfaces import RemoteOperationFailed, UploadFailed
from bizdesk.storage import SupabaseStorage


class TestSupabaseClient:

    def test_requires_url(self):
        with pytest.raises(ValueError):
            SupabaseClient(BackendConfig())

    def test_headers(self):
        client, session = _client(FakeResponse(body=[]), token="jwt")
        client.request("GET", "/rest/v1/suppliers")

        [req] = session.requests
        assert req["url"] == "https://demo.supabase.co/rest/v1/suppliers"
        assert req["headers"]["apikey"] == "anon-key"
        assert req["headers"]["Authorization"] == "Bearer jwt"
        assert req["timeout"] == 30

    def test_anon_bearer_without_token(self):
        client, _ = _client()
        assert client.headers()["Authorization"] == "Bearer anon-key"

    def test_error_message_extracted(self):
        client, _ = _client(FakeResponse(409, {"message": "duplicate key value"}))
        with pytest.raises(RemoteOperationFailed) as exc_info:
            client.request("POST", "rest/v1/suppliers")
        assert str(exc_info.value) == "duplicate key value"
        assert exc_info.value.status == 409

    def test_plain_text_error(self):
        client, _ = _client(FakeResponse(502, None, text="Bad Gateway"))
        with pytest.raises(RemoteOperationFailed, match="Bad Gateway"):
            client.request("GET", "rest/v1/suppliers")

    def test_network_error(self):
        client, _ = _client(error=requests.ConnectionError("unreachable"))
        with pytest.raises(RemoteOperationFailed) as exc_info:
            client.request("GET", "rest/v1/suppliers")
        assert exc_info.value.status is None


class TestSupabaseRepository:

    def test_list_params(self):
        client, session = _client(FakeResponse(body=[{"id": "1"}]))
        rows = SupabaseRepository(client, "passkeys").list(passkey="abc", is_active=True)

        assert rows == [{"id": "1"}]
        params = session.requests[0]["params"]
        assert params == {
            "select": "*",
            "passkey": "eq.abc",
            "is_active": "eq.true",
            "order": "created_at.desc",
        }

    def test_list_without_order(self):
        client, session = _client(FakeResponse(body=[]))
        SupabaseRepository(client, "goods_receipt_items").list(order_by="", goods_receipt_id="r1")
        assert "order" not in session.requests[0]["params"]

    def test_insert_returns_row(self):
        client, session = _client(FakeResponse(201, [{"id": "9", "name": "Acme"}]))
        row = SupabaseRepository(client, "suppliers").insert({"name": "Acme"})

        assert row == {"id": "9", "name": "Acme"}
        req = session.requests[0]
        assert req["method"] == "POST"
        assert req["json"] == [{"name": "Acme"}]
        assert req["headers"]["Prefer"] == "return=representation"

    def test_update_missing_row(self):
        client, _ = _client(FakeResponse(200, []))
        with pytest.raises(RemoteOperationFailed) as exc_info:
            SupabaseRepository(client, "suppliers").update("404", {"name": "x"})
        assert exc_info.value.status == 404

    def test_update_filters_by_id(self):
        client, session = _client(FakeResponse(200, [{"id": "7", "name": "x"}]))
        SupabaseRepository(client, "suppliers").update("7", {"name": "x"})

        req = session.requests[0]
        assert req["method"] == "PATCH"
        assert req["params"] == {"id": "eq.7"}

    def test_delete_where_requires_filter(self):
        client, session = _client()
        with pytest.raises(ValueError):
            SupabaseRepository(client, "suppliers").delete_where()
        assert session.requests == []


class TestSupabaseStorage:

    def test_upload(self):
        client, session = _client(FakeResponse(200, {"Key": "documents/1-a b.pdf"}))
        path = SupabaseStorage(client, "documents").upload("1-a b.pdf", b"%PDF", "application/pdf")

        assert path == "1-a b.pdf"
        req = session.requests[0]
        assert req["url"] == "https://demo.supabase.co/storage/v1/object/documents/1-a%20b.pdf"
        assert req["data"] == b"%PDF"
        assert req["headers"]["x-upsert"] == "true"
        assert req["headers"]["Content-Type"] == "application/pdf"

    def test_upload_failed_verbatim(self):
        client, session = _client(FakeResponse(403, {"message": "new row violates row-level security policy"}))
        with pytest.raises(UploadFailed) as exc_info:
            SupabaseStorage(client, "documents").upload("1-a.pdf", b"%PDF", "application/pdf")

        assert str(exc_info.value) == "new row violates row-level security policy"
        assert len(session.requests) == 1

    def test_public_url(self):
        client, _ = _client()
        url = SupabaseStorage(client, "documents").public_url("1-a.pdf")
        assert url == "https://demo.supabase.co/storage/v1/object/public/documents/1-a.pdf"


class TestSupabaseAuth:

    def test_no_token(self):
        client, session = _client()
        assert SupabaseAuth(client).get_user() is None
        assert session.requests == []

    def test_expired_token(self):
        client, _ = _client(FakeResponse(401, {"msg": "JWT expired"}), token="old")
        assert SupabaseAuth(client).get_user() is None

    def test_current_user(self):
        client, _ = _client(FakeResponse(200, {"id": "u1", "email": "a@b.in", "role": "authenticated"}), token="jwt")
        user = SupabaseAuth(client).get_user()
        assert user.id == "u1"
        assert user.email == "a@b.in"

    def test_server_error_propagates(self):
        client, _ = _client(FakeResponse(500, {"message": "boom"}), token="jwt")
        with pytest.raises(RemoteOperationFailed):
            SupabaseAuth(client).get_user()
