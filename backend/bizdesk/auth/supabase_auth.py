"""当前用户 - Supabase Auth"""

from __future__ import annotations

from ..data.client import SupabaseClient
from ..interfaces import IAuthProvider, RemoteOperationFailed
from ..models import User


class SupabaseAuth(IAuthProvider):
    """通过 access token 查询当前用户"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def get_user(self) -> User | None:
        if not self.client.access_token:
            return None
        try:
            response = self.client.request("GET", "auth/v1/user")
        except RemoteOperationFailed as e:
            if e.status in (401, 403):
                return None
            raise
        return User(**response.json())
