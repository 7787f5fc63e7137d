"""
打印路径 - 副窗口 + 平台原生打印

职责：
1. 读取文档表面的HTML（不存在则静默返回False）
2. 打开副窗口（被拦截则静默返回False）
3. 注入固定打印样式表 + 克隆的HTML
4. 等待图片（与栅格化器同一超时策略）后调起打印
5. 打印后（或取消后）关闭副窗口，任何退出路径都关闭

测试要点：
- test_print_missing_surface: 表面不存在 -> False
- test_print_popup_blocked: 副窗口被拦截 -> False
- test_print_closes_window_on_error: 异常路径也关闭窗口
"""

from __future__ import annotations

import asyncio
import logging
from html import escape

from ..config import get_config
from ..config.runtime_config import RuntimeConfig
from ..interfaces import IPrintHost

logger = logging.getLogger(__name__)

PRINT_STYLESHEET = """
      * { box-sizing: border-box; }
      body { font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial; margin: 8px; color: #0f172a; font-size: 14px; line-height: 1.4; }
      .doc { max-width: 100%; margin: 0 auto; border: 2px solid #0f172a; padding: 16px; border-radius: 8px; }
      .header { display: flex; align-items: center; gap: 12px; margin-bottom: 12px; }
      .brand { font-size: 20px; font-weight: 700; }
      .muted { color: #64748b; font-size: 13px; }
      .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; margin: 8px 0; }
      h2 { font-size: 18px; font-weight: 700; margin: 0; padding: 0; text-align: center; }
      table { width: 100%; border-collapse: collapse; margin-top: 8px; }
      th, td { border: 1px solid #e2e8f0; padding: 6px 8px; text-align: left; font-size: 13px; }
      th { font-weight: 600; }
      .totals td { border: none; padding: 4px 8px; font-size: 14px; }
      .totals .value { text-align: right; font-weight: 600; }
      .section { border: 1px solid #e2e8f0; margin: 6px 0; padding: 12px; border-radius: 4px; }
      .amount-words { font-style: italic; color: #64748b; margin-top: 4px; font-size: 12px; }
      .signature-section { margin-top: 12px; text-align: right; }
      img { max-height: 36px; }
      @media print {
        @page { margin: 10mm; size: A4; }
        * { background: none !important; }
        body { margin: 0; font-size: 13px; }
        .doc { border: 2px solid #0f172a; padding: 12px; }
        .section { margin: 4px 0; padding: 8px; }
        h2 { font-size: 16px; }
      }
"""


def build_print_document(title: str, markup: str) -> str:
    """拼装自包含的打印HTML"""
    return (
        "<!doctype html><html><head>"
        f"<title>{escape(title)}</title>"
        '<meta name="viewport" content="width=device-width, initial-scale=1" />'
        f"<style>{PRINT_STYLESHEET}</style>"
        f'</head><body><div class="doc">{markup}</div></body></html>'
    )


class PrintService:
    """打印路径实现"""

    def __init__(self, host: IPrintHost, config: RuntimeConfig | None = None):
        self.host = host
        config = config or get_config()
        self.print_config = config.print
        self.image_timeout_ms = config.export.image_timeout_ms

    async def print_surface(self, surface_id: str, title: str = "Document") -> bool:
        """打印文档表面；表面缺失或副窗口打不开时返回False"""
        markup = await self.host.read_markup(surface_id)
        if markup is None:
            logger.info(f"打印跳过，表面不存在: {surface_id}")
            return False

        cfg = self.print_config
        window = await self.host.open_window(cfg.window_width, cfg.window_height)
        if window is None:
            logger.info("打印跳过，副窗口无法打开")
            return False

        try:
            await window.write(build_print_document(title, markup))
            await window.wait_for_images(self.image_timeout_ms)
            await asyncio.sleep(cfg.print_delay_ms / 1000)
            await window.print()
        finally:
            await asyncio.sleep(cfg.close_delay_ms / 1000)
            await window.close()

        return True
