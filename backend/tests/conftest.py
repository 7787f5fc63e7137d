"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(runtime_config, fake_host):
        fake_host.add_surface("doc", 800, 3000)
"""

from __future__ import annotations

import asyncio
import io
import tempfile
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Generator

import pytest
from PIL import Image

from bizdesk.config import BusinessProfile, RuntimeConfig
from bizdesk.config.profile_loader import BankDetails
from bizdesk.config.runtime_config import BackendConfig
from bizdesk.data import SupabaseClient
from bizdesk.interfaces import (
    IAuthProvider,
    IDocumentHost,
    IDownloadTarget,
    ILinkOpener,
    IObjectStorage,
    IPrintHost,
    IPrintWindow,
    IRepository,
    IShareSheet,
    RemoteOperationFailed,
    ShareCancelled,
    UploadFailed,
)
from bizdesk.models import Artifact, CaptureSnapshot, User
from bizdesk.notices import CollectingNotifier


def make_image_bytes(width: int, height: int, image_format: str = "PNG", stripes: bool = True) -> bytes:
    """生成测试位图（横向条纹便于检查裁切）"""
    img = Image.new("RGB", (width, height), "white")
    if stripes:
        for y in range(0, height, 100):
            img.paste((y % 256, 0, 0), (0, y, width, min(y + 10, height)))
    buf = io.BytesIO()
    img.save(buf, format=image_format)
    return buf.getvalue()


def make_snapshot(width: int, height: int, lossy: bool = False) -> CaptureSnapshot:
    data = make_image_bytes(width, height, "JPEG" if lossy else "PNG")
    return CaptureSnapshot.from_bytes(data, lossy=lossy, scale=2.0)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（下载目录指向临时目录，去掉打印等待）"""
    config = RuntimeConfig()
    config.downloads.directory = temp_dir / "downloads"
    config.print.print_delay_ms = 0
    config.print.close_delay_ms = 0
    config.backend.url = "https://demo.supabase.co"
    config.backend.anon_key = "anon-key"
    return config


@pytest.fixture
def business_profile() -> BusinessProfile:
    return BusinessProfile(
        name="Sri Lakshmi Traders",
        address="12, Market Road, Coimbatore",
        phone="+91 98765 43210",
        email="accounts@example.in",
        gst_number="33ABCDE1234F1Z5",
        bank_details=BankDetails(
            bank_name="State Bank of India",
            account_number="12345678901",
            ifsc_code="SBIN0000123",
        ),
    )


# ============================================================================
# 宿主 Fakes
# ============================================================================

class FakeHost(IDocumentHost, IPrintHost):
    """内存文档宿主：表面 = 尺寸 + HTML"""

    def __init__(self, image_format: str = "PNG"):
        self.image_format = image_format
        self.surfaces: dict[str, tuple[int, int, str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.live_clones: set[str] = set()
        self.live_mounts: set[str] = set()
        self.capture_error: Exception | None = None
        self.window: FakePrintWindow | None = FakePrintWindow()

    def add_surface(self, surface_id: str, width: int, height: int, markup: str = "<p>doc</p>") -> None:
        self.surfaces[surface_id] = (width, height, markup)

    async def has_surface(self, surface_id: str) -> bool:
        self.calls.append(("has_surface", surface_id))
        return surface_id in self.surfaces

    @asynccontextmanager
    async def offscreen_clone(self, surface_id: str) -> AsyncIterator[str]:
        clone_id = f"clone-{uuid.uuid4().hex[:8]}"
        width, height, markup = self.surfaces[surface_id]
        self.surfaces[clone_id] = (width, height, markup)
        self.live_clones.add(clone_id)
        self.calls.append(("clone", clone_id))
        try:
            yield clone_id
        finally:
            self.live_clones.discard(clone_id)
            del self.surfaces[clone_id]

    @asynccontextmanager
    async def mount_markup(self, html: str, stylesheet: str) -> AsyncIterator[str]:
        container_id = f"mount-{uuid.uuid4().hex[:8]}"
        self.surfaces[container_id] = (800, 1000, html)
        self.live_mounts.add(container_id)
        self.calls.append(("mount", container_id))
        try:
            yield container_id
        finally:
            self.live_mounts.discard(container_id)
            del self.surfaces[container_id]

    async def wait_for_images(self, surface_id: str, timeout_ms: int) -> None:
        self.calls.append(("wait_for_images", surface_id))

    async def capture(self, surface_id, scale, image_format, quality, background) -> bytes:
        self.calls.append(("capture", surface_id))
        if self.capture_error is not None:
            raise self.capture_error
        width, height, _ = self.surfaces[surface_id]
        return make_image_bytes(width, height, image_format)

    async def read_markup(self, surface_id: str) -> str | None:
        surface = self.surfaces.get(surface_id)
        return surface[2] if surface else None

    async def open_window(self, width: int, height: int) -> IPrintWindow | None:
        return self.window


class FakePrintWindow(IPrintWindow):
    def __init__(self, fail_on_print: bool = False):
        self.fail_on_print = fail_on_print
        self.html: str | None = None
        self.events: list[str] = []
        self.closed = False

    async def write(self, html: str) -> None:
        self.html = html
        self.events.append("write")

    async def wait_for_images(self, timeout_ms: int) -> None:
        self.events.append("wait_for_images")

    async def print(self) -> None:
        if self.fail_on_print:
            raise RuntimeError("print engine unavailable")
        self.events.append("print")

    async def close(self) -> None:
        self.closed = True
        self.events.append("close")


class FakeShareSheet(IShareSheet):
    """原生分享：outcome 取 shared / cancelled / error"""

    def __init__(self, available: bool = True, outcome: str = "shared"):
        self.available = available
        self.outcome = outcome
        self.shared: list[tuple[str, str, str | None]] = []

    async def can_share(self, artifact: Artifact) -> bool:
        return self.available

    async def share(self, artifact: Artifact, title: str, text: str | None = None) -> None:
        if self.outcome == "cancelled":
            raise ShareCancelled(artifact.filename)
        if self.outcome == "error":
            raise RuntimeError("share target crashed")
        self.shared.append((artifact.filename, title, text))


class FakeDownloader(IDownloadTarget):
    def __init__(self):
        self.downloads: list[Artifact] = []

    async def download(self, artifact: Artifact) -> str:
        self.downloads.append(artifact)
        return f"/downloads/{artifact.filename}"


class FakeOpener(ILinkOpener):
    def __init__(self):
        self.opened: list[str] = []

    async def open_link(self, url: str) -> None:
        self.opened.append(url)


class FakeStorage(IObjectStorage):
    def __init__(self, fail_message: str | None = None):
        self.fail_message = fail_message
        self.uploads: list[tuple[str, bytes, str, bool]] = []

    def upload(self, path: str, data: bytes, content_type: str, upsert: bool = True) -> str:
        self.uploads.append((path, data, content_type, upsert))
        if self.fail_message:
            raise UploadFailed(self.fail_message)
        return path

    def public_url(self, path: str) -> str:
        return f"https://cdn.example.com/documents/{path}"


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


# ============================================================================
# 数据访问 Fakes
# ============================================================================

class FakeRepository(IRepository):
    """内存仓储（记录每次调用）"""

    def __init__(self, rows: list[dict[str, Any]] | None = None, error: str | None = None):
        self.rows = list(rows or [])
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    def _check(self) -> None:
        if self.error:
            raise RemoteOperationFailed(self.error, status=400)

    def list(self, order_by: str = "created_at", descending: bool = True, **filters: Any) -> list[dict[str, Any]]:
        self.calls.append(("list", filters))
        self._check()
        return [r for r in self.rows if all(r.get(k) == v for k, v in filters.items())]

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        return self.insert_many([record])[0]

    def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append(("insert", records))
        self._check()
        created = [{**r, "id": r.get("id") or uuid.uuid4().hex} for r in records]
        self.rows.extend(created)
        return created

    def update(self, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update", record_id))
        self._check()
        for row in self.rows:
            if row["id"] == record_id:
                row.update(patch)
                return dict(row)
        raise RemoteOperationFailed("not found", status=404)

    def delete(self, record_id: str) -> None:
        self.delete_where(id=record_id)

    def delete_where(self, **filters: Any) -> None:
        self.calls.append(("delete", filters))
        self._check()
        self.rows = [r for r in self.rows if not all(r.get(k) == v for k, v in filters.items())]


class FakeAuth(IAuthProvider):
    def __init__(self, user: User | None = None):
        self.user = user

    def get_user(self) -> User | None:
        return self.user


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str = ""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    """记录请求参数，按顺序返回预置响应"""

    def __init__(self, *responses: FakeResponse, error: Exception | None = None):
        self.responses = list(responses)
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def make_client(
    *responses: FakeResponse, token: str | None = None, error: Exception | None = None
) -> tuple[SupabaseClient, FakeSession]:
    session = FakeSession(*responses, error=error)
    config = BackendConfig(url="https://demo.supabase.co/", anon_key="anon-key")
    return SupabaseClient(config, access_token=token, session=session), session


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    async def screenshot(self, **kwargs) -> bytes:
        self.page.screenshots.append((self.selector, kwargs))
        return make_image_bytes(40, 30)


class FakeDownload:
    def __init__(self, suggested_filename: str):
        self.suggested_filename = suggested_filename

    async def save_as(self, target) -> None:
        Path(target).write_bytes(b"%PDF-1.4 data")


class FakeDownloadInfo:
    def __init__(self, download: FakeDownload):
        self._download = download

    @property
    def value(self):
        async def resolve():
            return self._download
        return resolve()


class FakePopup:
    """弹出窗口（记录写入/打印/关闭）"""

    def __init__(self):
        self.content: str | None = None
        self.scripts: list[Any] = []
        self.closed = False

    async def set_content(self, html: str) -> None:
        self.content = html

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scripts.append((script, arg))
        return 0

    def is_closed(self) -> bool:
        return self.closed

    async def close(self) -> None:
        self.closed = True


class FakePage:
    """Playwright Page 替身：evaluate 按脚本内容返回预置结果"""

    def __init__(
        self,
        dpr: float = 2,
        share_result: str = "shared",
        can_share: bool = True,
        popup: FakePopup | None = None,
        fail_on: str | None = None,
    ):
        self.dpr = dpr
        self.share_result = share_result
        self.can_share = can_share
        self.popup = popup
        self.fail_on = fail_on
        self.scripts: list[tuple[str, Any]] = []
        self.screenshots: list[tuple[str, dict]] = []

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scripts.append((script, arg))
        if self.fail_on and self.fail_on in script:
            raise RuntimeError("evaluate failed")
        if "devicePixelRatio" in script:
            return self.dpr
        if "navigator.share(data)" in script:
            return self.share_result
        if "navigator.canShare" in script:
            return self.can_share
        if "window.open('', '_blank'" in script:
            return self.popup is not None
        if "!== null" in script:
            return True
        return None

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def wait_for_event(self, event: str) -> Any:
        if self.popup is None:
            # 永不触发
            await asyncio.Event().wait()
        await asyncio.sleep(0)
        return self.popup

    @asynccontextmanager
    async def expect_download(self) -> AsyncIterator[FakeDownloadInfo]:
        # 文件名取最近一次下载脚本的参数
        info = FakeDownloadInfo(FakeDownload(""))
        yield info
        info._download.suggested_filename = self.scripts[-1][1][1]


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def signed_in() -> FakeAuth:
    return FakeAuth(User(id="user-1", email="owner@example.in"))


@pytest.fixture
def signed_out() -> FakeAuth:
    return FakeAuth(None)


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
