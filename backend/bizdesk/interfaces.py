"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 导出流水线只依赖宿主能力接口，不直接依赖浏览器实现
2. 数据访问/认证/通知均以接口注入，便于单元测试和mock替换
3. 每个接口定义清晰的输入输出类型

使用方式：
    from bizdesk.interfaces import IDocumentHost

    class MyHost(IDocumentHost):
        async def has_surface(self, surface_id: str) -> bool:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import Artifact, Notice, User


# ============================================================================
# 宿主能力接口（文档表面/分享/下载/打印）
# ============================================================================

class IDocumentHost(ABC):
    """文档宿主接口 - 提供已渲染的文档表面"""

    @abstractmethod
    async def has_surface(self, surface_id: str) -> bool:
        """判断文档表面是否存在"""
        ...

    @abstractmethod
    def offscreen_clone(self, surface_id: str) -> AbstractAsyncContextManager[str]:
        """
        克隆文档表面到屏幕外

        克隆节点宽度固定、白底、带内边距，退出上下文时必须移除。

        Returns:
            异步上下文管理器，进入时给出克隆节点的标识
        """
        ...

    @abstractmethod
    def mount_markup(self, html: str, stylesheet: str) -> AbstractAsyncContextManager[str]:
        """
        将HTML片段挂载到屏幕外的临时容器

        Returns:
            异步上下文管理器，进入时给出临时容器的标识
        """
        ...

    @abstractmethod
    async def wait_for_images(self, surface_id: str, timeout_ms: int) -> None:
        """等待表面内所有图片加载完成/失败/超时"""
        ...

    @abstractmethod
    async def capture(
        self,
        surface_id: str,
        scale: float,
        image_format: str,
        quality: float,
        background: str,
    ) -> bytes:
        """
        截取文档表面为位图

        Args:
            surface_id: 表面标识
            scale: 设备像素倍率（>=2）
            image_format: JPEG 或 PNG
            quality: JPEG质量（0-1）
            background: 背景色

        Returns:
            编码后的位图字节
        """
        ...


class IShareSheet(ABC):
    """原生分享面板接口"""

    @abstractmethod
    async def can_share(self, artifact: Artifact) -> bool:
        """能力探测：宿主是否能分享该文件（不只是API存在）"""
        ...

    @abstractmethod
    async def share(self, artifact: Artifact, title: str, text: str | None = None) -> None:
        """
        调起原生分享

        Raises:
            ShareCancelled: 用户取消（非错误）
            ShareFailed: 分享失败
        """
        ...


class IDownloadTarget(ABC):
    """同设备下载接口"""

    @abstractmethod
    async def download(self, artifact: Artifact) -> str:
        """
        触发下载，临时句柄在任何退出路径上都必须释放

        Returns:
            下载位置描述（文件路径等）
        """
        ...


class ILinkOpener(ABC):
    """在新的浏览上下文中打开链接"""

    @abstractmethod
    async def open_link(self, url: str) -> None:
        ...


class IPrintWindow(ABC):
    """打印用的副窗口"""

    @abstractmethod
    async def write(self, html: str) -> None:
        """写入完整HTML文档"""
        ...

    @abstractmethod
    async def wait_for_images(self, timeout_ms: int) -> None:
        ...

    @abstractmethod
    async def print(self) -> None:
        """调起平台打印流程"""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class IPrintHost(ABC):
    """打印宿主接口"""

    @abstractmethod
    async def read_markup(self, surface_id: str) -> str | None:
        """读取表面内部HTML，不存在返回None"""
        ...

    @abstractmethod
    async def open_window(self, width: int, height: int) -> IPrintWindow | None:
        """能力探测：打开副窗口，被拦截时返回None"""
        ...


# ============================================================================
# 对象存储接口
# ============================================================================

class IObjectStorage(ABC):
    """对象存储接口"""

    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str, upsert: bool = True) -> str:
        """
        上传对象

        Returns:
            存储内的对象路径

        Raises:
            UploadFailed: 存储拒绝（原样透传消息）
        """
        ...

    @abstractmethod
    def public_url(self, path: str) -> str:
        """获取可公开解析的URL"""
        ...


# ============================================================================
# 数据访问/认证/通知接口
# ============================================================================

class IRepository(ABC):
    """表级数据访问接口"""

    @abstractmethod
    def list(self, order_by: str = "created_at", descending: bool = True, **filters: Any) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        """插入并返回写入后的记录"""
        ...

    @abstractmethod
    def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def update(self, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        """更新并返回更新后的记录"""
        ...

    @abstractmethod
    def delete(self, record_id: str) -> None:
        ...

    @abstractmethod
    def delete_where(self, **filters: Any) -> None:
        """按等值条件批量删除"""
        ...


class IAuthProvider(ABC):
    """认证接口"""

    @abstractmethod
    def get_user(self) -> User | None:
        """当前用户，未登录返回None"""
        ...


class INotifier(Protocol):
    """用户通知协议（toast）"""

    def notify(self, notice: Notice) -> None:
        ...


# ============================================================================
# 异常定义
# ============================================================================

class BizdeskError(Exception):
    """基础异常"""
    pass


class ElementNotFound(BizdeskError):
    """导出目标不存在"""

    def __init__(self, surface_id: str):
        super().__init__(f"文档表面不存在: {surface_id}")
        self.surface_id = surface_id


class NotAuthenticated(BizdeskError):
    """无登录会话时尝试写操作"""
    pass


class RemoteOperationFailed(BizdeskError):
    """后端查询/写入被拒绝"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class UploadFailed(BizdeskError):
    """对象存储拒绝上传"""
    pass


class ShareFailed(BizdeskError):
    """原生分享失败（非取消）"""
    pass


class ExportError(BizdeskError):
    """打包/导出错误"""
    pass


class ShareCancelled(Exception):
    """用户取消分享 - 终态信号，不属于错误"""
    pass
