"""
运行期配置 - 读取 config/runtime.yaml

职责：
- 加载导出/打印/分享/后端/下载等运行参数
- 提供环境变量覆盖机制（BIZDESK_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ExportConfig(BaseModel):
    """导出配置"""

    scale: float = 2.0
    image_timeout_ms: int = 1000
    image_format: str = "JPEG"
    jpeg_quality: float = 0.95
    background: str = "#ffffff"
    page_format: str = "A4"
    orientation: str = "portrait"
    top_margin_mm: float = 10.0
    paginate: bool = True
    offscreen_width_px: int = 800
    offscreen_padding_px: int = 20

    @field_validator("scale")
    @classmethod
    def _check_scale(cls, v: float) -> float:
        if v < 2:
            raise ValueError("scale 必须 >= 2")
        return v

    @field_validator("image_format")
    @classmethod
    def _check_format(cls, v: str) -> str:
        v = v.upper()
        if v not in ("JPEG", "PNG"):
            raise ValueError(f"不支持的位图格式: {v}")
        return v


class PrintConfig(BaseModel):
    """打印配置"""

    window_width: int = 1024
    window_height: int = 768
    print_delay_ms: int = 100
    close_delay_ms: int = 250


class ShareConfig(BaseModel):
    """分享配置"""

    messaging_host: str = "api.whatsapp.com"
    default_message: str = "Please find attached: {filename}"


class BackendConfig(BaseModel):
    """托管后端（Supabase）配置"""

    url: str = ""
    anon_key: str = ""
    storage_bucket: str = "documents"
    request_timeout_sec: int = 30


class DownloadConfig(BaseModel):
    """本地下载配置"""

    directory: Path = Path("downloads")


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: Path = Path("logs/bizdesk.log")


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    profile_path: Path = Path("config/business.yaml")

    export: ExportConfig = Field(default_factory=ExportConfig)
    print: PrintConfig = Field(default_factory=PrintConfig)
    share: ShareConfig = Field(default_factory=ShareConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    downloads: DownloadConfig = Field(default_factory=DownloadConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "BIZDESK_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            export=ExportConfig(**cls._extract(runtime_opts, "export")),
            print=PrintConfig(**cls._extract(runtime_opts, "print")),
            share=ShareConfig(**cls._extract(runtime_opts, "share")),
            backend=BackendConfig(**cls._extract(runtime_opts, "backend")),
            downloads=DownloadConfig(**cls._extract(runtime_opts, "downloads")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.downloads.directory.is_absolute():
            self.downloads.directory = (base_dir / self.downloads.directory).resolve()
        if not self.logging.log_file.is_absolute():
            self.logging.log_file = (base_dir / self.logging.log_file).resolve()

    def ensure_dirs(self) -> None:
        """确保必要目录存在"""
        self.downloads.directory.mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
