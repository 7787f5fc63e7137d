"""
认证层

- supabase_auth: 当前用户查询
- passkey: 共享口令登录门与服务端校验
"""

from .passkey import PasskeyGate, PasskeyResult, PasskeyValidator, Session
from .supabase_auth import SupabaseAuth

__all__ = [
    "SupabaseAuth",
    "PasskeyGate",
    "PasskeyValidator",
    "PasskeyResult",
    "Session",
]
