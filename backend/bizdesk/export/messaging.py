"""消息深链接构建"""

from __future__ import annotations

import re
import time
from urllib.parse import quote, urlencode

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str | None) -> str | None:
    """只保留数字，空结果视为未提供"""
    if not phone:
        return None
    digits = _NON_DIGITS.sub("", phone)
    return digits or None


def compose_message(message: str | None, url: str, filename: str, default: str) -> str:
    """消息正文 + 链接"""
    text = message or default.format(filename=filename)
    return f"{text}\n{url}"


def build_messaging_link(host: str, text: str, phone: str | None = None) -> str:
    """https://<host>/send?phone=<digits>&text=<urlencoded>，无号码时省略phone"""
    params = {}
    digits = normalize_phone(phone)
    if digits:
        params["phone"] = digits
    params["text"] = text
    return f"https://{host}/send?{urlencode(params, quote_via=quote)}"


def object_path(filename: str, now_ms: int | None = None) -> str:
    """存储路径：<epoch-ms>-<filename>"""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{now_ms}-{filename}"
