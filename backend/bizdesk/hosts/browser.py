"""
浏览器宿主 - 基于 Playwright 驱动的页面提供文档表面/分享/下载/打印

职责：
1. 文档表面定位、屏幕外克隆、HTML片段挂载（退出时移除）
2. 等待图片加载（单图超时，失败不阻塞）
3. 元素截图（浏览器上下文的设备像素倍率须等于配置倍率）
4. navigator.share 能力探测与调用
5. 对象URL下载（点击后立即释放URL）
6. 副窗口打印

依赖：
- playwright: 无头/有头 Chromium 自动化
"""

from __future__ import annotations

import asyncio
import base64
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Page, async_playwright

from ..config.runtime_config import RuntimeConfig
from ..interfaces import (
    IDocumentHost,
    IDownloadTarget,
    ILinkOpener,
    IPrintHost,
    IPrintWindow,
    IShareSheet,
    ExportError,
    ShareCancelled,
    ShareFailed,
)
from ..models import Artifact

logger = logging.getLogger(__name__)

# 每张图片：已完成/onload/onerror/超时 任一即视为就绪
WAIT_IMAGES_JS = """
([id, timeoutMs]) => {
  const root = id ? document.getElementById(id) : document;
  if (!root) return Promise.resolve(0);
  const images = Array.from(root.getElementsByTagName('img'));
  return Promise.all(images.map(img => new Promise(resolve => {
    if (img.complete) { resolve(true); return; }
    img.onload = () => resolve(true);
    img.onerror = () => resolve(true);
    setTimeout(() => resolve(true), timeoutMs);
  }))).then(r => r.length);
}
"""

CLONE_JS = """
([sourceId, cloneId, widthPx, paddingPx, background]) => {
  const el = document.getElementById(sourceId);
  const clone = el.cloneNode(true);
  clone.id = cloneId;
  clone.style.position = 'absolute';
  clone.style.left = '-9999px';
  clone.style.top = '0';
  clone.style.width = widthPx + 'px';
  clone.style.background = background;
  clone.style.padding = paddingPx + 'px';
  document.body.appendChild(clone);
}
"""

MOUNT_JS = """
([containerId, html, css, paddingPx, background]) => {
  const div = document.createElement('div');
  div.id = containerId;
  div.style.position = 'absolute';
  div.style.left = '-9999px';
  div.style.top = '0';
  div.style.width = '210mm';
  div.style.background = background;
  div.style.padding = paddingPx + 'px';
  div.innerHTML = html;
  const style = document.createElement('style');
  style.textContent = css;
  div.prepend(style);
  document.body.appendChild(div);
}
"""

REMOVE_JS = "id => { const el = document.getElementById(id); if (el) el.remove(); }"

TO_FILE_JS = """
  const toFile = (b64, name, type) => {
    const bin = atob(b64);
    const buf = new Uint8Array(bin.length);
    for (let i = 0; i < bin.length; i++) buf[i] = bin.charCodeAt(i);
    return new File([buf], name, { type });
  };
"""

CAN_SHARE_JS = """
([b64, name, type]) => {""" + TO_FILE_JS + """
  if (!navigator.share || !navigator.canShare) return false;
  return navigator.canShare({ files: [toFile(b64, name, type)] });
}
"""

SHARE_JS = """
async ([b64, name, type, title, text]) => {""" + TO_FILE_JS + """
  const data = { title, files: [toFile(b64, name, type)] };
  if (text) data.text = text;
  try {
    await navigator.share(data);
    return 'shared';
  } catch (e) {
    return e.name === 'AbortError' ? 'cancelled' : 'error:' + e.message;
  }
}
"""

DOWNLOAD_JS = """
([b64, name, type]) => {""" + TO_FILE_JS + """
  const url = URL.createObjectURL(toFile(b64, name, type));
  try {
    const a = document.createElement('a');
    a.href = url;
    a.download = name;
    document.body.appendChild(a);
    a.click();
    document.body.removeChild(a);
  } finally {
    URL.revokeObjectURL(url);
  }
}
"""


def _b64(artifact: Artifact) -> str:
    return base64.b64encode(artifact.data).decode("ascii")


class BrowserPrintWindow(IPrintWindow):
    """Playwright 弹出窗口"""

    def __init__(self, popup: Page):
        self.popup = popup

    async def write(self, html: str) -> None:
        await self.popup.set_content(html)

    async def wait_for_images(self, timeout_ms: int) -> None:
        await self.popup.evaluate(WAIT_IMAGES_JS, [None, timeout_ms])

    async def print(self) -> None:
        await self.popup.evaluate("() => { window.focus(); window.print(); }")

    async def close(self) -> None:
        if not self.popup.is_closed():
            await self.popup.close()


class BrowserHost(IDocumentHost, IShareSheet, IDownloadTarget, ILinkOpener, IPrintHost):
    """浏览器宿主实现"""

    def __init__(self, page: Page, config: RuntimeConfig):
        self.page = page
        self.export_config = config.export
        self.downloads_dir = config.downloads.directory

    # ------------------------------------------------------------------
    # 文档表面
    # ------------------------------------------------------------------

    async def has_surface(self, surface_id: str) -> bool:
        return await self.page.evaluate("id => document.getElementById(id) !== null", surface_id)

    @asynccontextmanager
    async def offscreen_clone(self, surface_id: str) -> AsyncIterator[str]:
        cfg = self.export_config
        clone_id = f"bizdesk-clone-{uuid.uuid4().hex}"
        await self.page.evaluate(
            CLONE_JS,
            [surface_id, clone_id, cfg.offscreen_width_px, cfg.offscreen_padding_px, cfg.background],
        )
        try:
            yield clone_id
        finally:
            await self.page.evaluate(REMOVE_JS, clone_id)

    @asynccontextmanager
    async def mount_markup(self, html: str, stylesheet: str) -> AsyncIterator[str]:
        cfg = self.export_config
        container_id = f"bizdesk-mount-{uuid.uuid4().hex}"
        await self.page.evaluate(
            MOUNT_JS,
            [container_id, html, stylesheet, cfg.offscreen_padding_px, cfg.background],
        )
        try:
            yield container_id
        finally:
            await self.page.evaluate(REMOVE_JS, container_id)

    async def wait_for_images(self, surface_id: str, timeout_ms: int) -> None:
        count = await self.page.evaluate(WAIT_IMAGES_JS, [surface_id, timeout_ms])
        logger.debug(f"图片就绪: {surface_id} 共{count}张")

    async def capture(
        self,
        surface_id: str,
        scale: float,
        image_format: str,
        quality: float,
        background: str,
    ) -> bytes:
        dpr = await self.page.evaluate("() => window.devicePixelRatio")
        if dpr < 2 or dpr != scale:
            raise ExportError(f"设备像素倍率 {dpr} 与截图倍率 {scale} 不一致（需 >=2 且相等）")

        locator = self.page.locator(f'[id="{surface_id}"]')
        kwargs = {"type": image_format.lower(), "scale": "device", "animations": "disabled"}
        if image_format == "JPEG":
            kwargs["quality"] = round(quality * 100)
        return await locator.screenshot(**kwargs)

    # ------------------------------------------------------------------
    # 分享/下载/链接
    # ------------------------------------------------------------------

    async def can_share(self, artifact: Artifact) -> bool:
        return bool(
            await self.page.evaluate(
                CAN_SHARE_JS, [_b64(artifact), artifact.filename, artifact.content_type]
            )
        )

    async def share(self, artifact: Artifact, title: str, text: str | None = None) -> None:
        result = await self.page.evaluate(
            SHARE_JS,
            [_b64(artifact), artifact.filename, artifact.content_type, title, text],
        )
        if result == "cancelled":
            raise ShareCancelled(artifact.filename)
        if result != "shared":
            raise ShareFailed(result.removeprefix("error:"))

    async def download(self, artifact: Artifact) -> str:
        self.downloads_dir.mkdir(parents=True, exist_ok=True)
        async with self.page.expect_download() as download_info:
            await self.page.evaluate(
                DOWNLOAD_JS, [_b64(artifact), artifact.filename, artifact.content_type]
            )
        download = await download_info.value
        target = self.downloads_dir / download.suggested_filename
        await download.save_as(target)
        return str(target)

    async def open_link(self, url: str) -> None:
        await self.page.evaluate("url => { window.open(url, '_blank'); }", url)

    # ------------------------------------------------------------------
    # 打印
    # ------------------------------------------------------------------

    async def read_markup(self, surface_id: str) -> str | None:
        return await self.page.evaluate(
            "id => { const el = document.getElementById(id); return el ? el.innerHTML : null; }",
            surface_id,
        )

    async def open_window(self, width: int, height: int) -> IPrintWindow | None:
        popup_event = asyncio.ensure_future(self.page.wait_for_event("popup"))
        try:
            opened = await self.page.evaluate(
                "([w, h]) => window.open('', '_blank', `width=${w},height=${h}`) !== null",
                [width, height],
            )
        except Exception:
            popup_event.cancel()
            raise
        if not opened:
            popup_event.cancel()
            return None
        return BrowserPrintWindow(await popup_event)


@asynccontextmanager
async def open_browser_host(
    config: RuntimeConfig,
    url: str | None = None,
    html: str | None = None,
    headless: bool = True,
) -> AsyncIterator[BrowserHost]:
    """启动浏览器并打开页面（url 或 html 二选一），退出时关闭"""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(
                device_scale_factor=config.export.scale,
                accept_downloads=True,
            )
            page = await context.new_page()
            if url:
                await page.goto(url, wait_until="load")
            elif html is not None:
                await page.set_content(html, wait_until="load")
            yield BrowserHost(page, config)
        finally:
            await browser.close()
