"""
把HTML片段或页面中的文档表面导出为PDF（落到下载目录）。

示例：
  python tools/export_html.py --html receipt.html --name GRN-0001
  python tools/export_html.py --receipt grn-0001.json --name GRN-0001
  python tools/export_html.py --url http://localhost:5173/receipts/1 --surface receipt-doc --name GRN-0001
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def _load_markup(args: argparse.Namespace, config) -> str:
    """HTML片段：直接读取，或由收货单JSON渲染"""
    if args.html:
        return Path(args.html).read_text(encoding="utf-8")

    from bizdesk.config import load_profile  # type: ignore
    from bizdesk.documents import goods_receipt_document, render_trade_document  # type: ignore
    from bizdesk.models import GoodsReceipt  # type: ignore

    receipt = GoodsReceipt.model_validate_json(Path(args.receipt).read_text(encoding="utf-8"))
    return render_trade_document(goods_receipt_document(receipt), load_profile(config.profile_path))


async def _run(args: argparse.Namespace) -> str:
    from bizdesk.config import configure_logging, reload_config  # type: ignore
    from bizdesk.export import DeliveryDispatcher, ExportPipeline  # type: ignore
    from bizdesk.hosts import DirectoryDownloadTarget, open_browser_host  # type: ignore
    from bizdesk.models import DeliveryIntent, ExportRequest  # type: ignore

    config = reload_config(args.config)
    configure_logging(config.logging)
    config.ensure_dirs()

    dispatcher = DeliveryDispatcher(downloader=DirectoryDownloadTarget(config.downloads.directory))

    if args.url:
        async with open_browser_host(config, url=args.url, headless=not args.headed) as host:
            pipeline = ExportPipeline(host, dispatcher, config)
            outcome = await pipeline.export(
                ExportRequest(
                    surface_id=args.surface,
                    filename=args.name,
                    intent=DeliveryIntent.DOWNLOAD,
                    offscreen=args.offscreen,
                )
            )
    else:
        markup = _load_markup(args, config)
        async with open_browser_host(config, html="<html><body></body></html>", headless=not args.headed) as host:
            pipeline = ExportPipeline(host, dispatcher, config)
            outcome = await pipeline.export_markup(markup, args.name)

    return f"{outcome.location} pages={outcome.page_count}"


def main() -> int:
    parser = argparse.ArgumentParser(description="Export an HTML surface to a paginated PDF.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--html", help="HTML片段文件（挂载到屏幕外容器导出）")
    source.add_argument("--url", help="页面地址（配合 --surface 指定元素id）")
    source.add_argument("--receipt", help="收货单JSON（含 items 明细），按单据模板渲染后导出")
    parser.add_argument("--surface", default="", help="文档表面元素id（--url 时必填）")
    parser.add_argument("--name", required=True, help="输出文件名（自动追加 .pdf）")
    parser.add_argument("--config", default="config/runtime.yaml", help="运行期配置文件")
    parser.add_argument("--offscreen", action="store_true", help="屏幕外克隆后截图")
    parser.add_argument("--headed", action="store_true", help="有头模式（调试用）")
    args = parser.parse_args()

    if args.url and not args.surface:
        parser.error("--url 需要同时提供 --surface")

    _add_backend_to_path()
    try:
        print(asyncio.run(_run(args)))
    except Exception as exc:  # noqa: BLE001
        logging.getLogger("export_html").error(f"导出失败: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
