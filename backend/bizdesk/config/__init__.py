"""
配置层 - 加载运行期配置与企业资料

职责：
- 加载 config/runtime.yaml（运行期参数，支持环境变量覆盖）
- 加载 config/business.yaml（企业抬头/银行/GST）
- 提供类型安全的配置访问接口
"""

from .logging_setup import configure_logging
from .profile_loader import BusinessProfile, ProfileLoader, load_profile
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "ProfileLoader",
    "BusinessProfile",
    "load_profile",
    "RuntimeConfig",
    "get_config",
    "reload_config",
    "configure_logging",
]
