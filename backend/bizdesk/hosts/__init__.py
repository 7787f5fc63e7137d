"""
宿主适配层 - 导出流水线所需宿主能力的具体实现

- browser: Playwright 浏览器页面（表面/分享/下载/打印）
- local: 本地目录下载 / 系统浏览器打开链接
"""

from .browser import BrowserHost, BrowserPrintWindow, open_browser_host
from .local import DirectoryDownloadTarget, SystemLinkOpener

__all__ = [
    "BrowserHost",
    "BrowserPrintWindow",
    "open_browser_host",
    "DirectoryDownloadTarget",
    "SystemLinkOpener",
]
