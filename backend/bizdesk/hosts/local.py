"""
本地宿主能力 - 下载到目录 / 系统浏览器打开链接

测试要点：
- test_download_writes_file: 下载落盘
- test_download_temp_removed: 临时文件在任何路径上都被删除
- test_download_name_collision: 重名自动追加序号
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import webbrowser
from pathlib import Path

from ..interfaces import IDownloadTarget, ILinkOpener
from ..models import Artifact

logger = logging.getLogger(__name__)


class DirectoryDownloadTarget(IDownloadTarget):
    """下载到本地目录（先写临时文件再原子改名）"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    async def download(self, artifact: Artifact) -> str:
        path = await asyncio.to_thread(self._write, artifact)
        return str(path)

    def _write(self, artifact: Artifact) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".partial-", suffix=".pdf", dir=self.directory)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(artifact.data)
            target = self._unique_path(artifact.filename)
            os.replace(tmp_path, target)
            return target
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _unique_path(self, filename: str) -> Path:
        """重名时追加 (1)/(2)..."""
        target = self.directory / filename
        stem, suffix = target.stem, target.suffix
        n = 1
        while target.exists():
            target = self.directory / f"{stem} ({n}){suffix}"
            n += 1
        return target


class SystemLinkOpener(ILinkOpener):
    """用系统默认浏览器在新标签页打开链接"""

    async def open_link(self, url: str) -> None:
        opened = await asyncio.to_thread(webbrowser.open_new_tab, url)
        if not opened:
            logger.warning(f"无法打开浏览器: {url}")
