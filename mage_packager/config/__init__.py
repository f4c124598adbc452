"""包描述配置模块

提供 package.yml 的加载、验证和模板生成功能。
"""

from .schema import AuthorModel, PackageDescriptor, RequiredPackageModel, Stability
from .errors import ConfigError, ConfigValidationError
from .validator import DescriptorValidator, validate_descriptor
from .loader import (
    ConfigLoader,
    DESCRIPTOR_FILE_NAME,
    load_config,
    validate_config,
    generate_config,
    config_loader
)

__all__ = [
    # 主要类
    "PackageDescriptor",
    "AuthorModel",
    "RequiredPackageModel",
    "Stability",
    "ConfigLoader",
    "DescriptorValidator",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "load_config",
    "validate_config",
    "validate_descriptor",
    "generate_config",

    # 常量与单例
    "DESCRIPTOR_FILE_NAME",
    "config_loader",
]
