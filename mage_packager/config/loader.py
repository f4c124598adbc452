"""
配置加载器

负责从 package.yml 加载包描述并进行验证，以及生成描述文件模板。
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError, ConfigValidationError
from .schema import PackageDescriptor
from .validator import DescriptorValidator


# 包描述文件名（固定）
DESCRIPTOR_FILE_NAME = "package.yml"

# generate 命令写出的模板
DESCRIPTOR_STUB = """\
name: Module_Module
version: 0.0.1
stability: stable
license: "License"
channel: community
summary: "Module short description"
description: "Module long description"
notes: "Releases notes"
authors:
    - { name: "Author Name", user: authoruser, email: user@example.com }
php_min_version: 5.4.0
php_max_version: 5.6.100
required_packages:
    - { name: Package_Name, channel: channel, min: ~, max: ~ }
"""


class ConfigLoader:
    """包描述加载器"""

    def __init__(self):
        self.yaml = YAML()
        self.yaml.preserve_quotes = True
        self.validator = DescriptorValidator()

    def load_from_file(self, config_path: Union[str, Path]) -> PackageDescriptor:
        """从文件加载包描述

        Args:
            config_path: package.yml 路径

        Returns:
            PackageDescriptor: 验证后的包描述

        Raises:
            ConfigError: 文件缺失、不可读或解析失败
            ConfigValidationError: 字段验证失败
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"未找到 {DESCRIPTOR_FILE_NAME} 文件: {config_path}")

        if not config_path.is_file():
            raise ConfigError(f"配置路径不是文件: {config_path}")

        if not os.access(config_path, os.R_OK):
            raise ConfigError(f"{DESCRIPTOR_FILE_NAME} 文件不可读: {config_path}")

        if config_path.suffix.lower() not in ['.yaml', '.yml']:
            raise ConfigError(f"配置文件必须是 .yaml 或 .yml 格式: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_data = self.yaml.load(f)
        except YAMLError as e:
            raise ConfigError(f"YAML 解析错误: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"文件读取错误: {e}") from e

        return self.load_from_dict(raw_data)

    def load_from_dict(self, data: Dict[str, Any]) -> PackageDescriptor:
        """从字典加载包描述

        Raises:
            ConfigError: 数据为空或格式不正确
            ConfigValidationError: 字段验证失败
        """
        return self.validator.validate(data)

    def load_from_directory(self, directory: Union[str, Path]) -> PackageDescriptor:
        """加载目录中的 package.yml"""
        return self.load_from_file(Path(directory) / DESCRIPTOR_FILE_NAME)

    def write_stub(self, directory: Union[str, Path]) -> Path:
        """在目录中生成 package.yml 模板

        Args:
            directory: 目标目录

        Returns:
            Path: 生成的文件路径

        Raises:
            ConfigError: 目录不存在或写入失败
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ConfigError(f"无效的目标目录: {directory}")

        config_path = directory.resolve() / DESCRIPTOR_FILE_NAME
        try:
            config_path.write_text(DESCRIPTOR_STUB, encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"生成配置文件失败: {e}") from e

        return config_path

    def validate_file(self, config_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """验证配置文件并返回错误列表

        Returns:
            List[Dict]: 错误列表，空列表表示验证通过
        """
        try:
            self.load_from_file(config_path)
            return []
        except ConfigValidationError as e:
            return e.errors
        except ConfigError as e:
            return [{
                'loc': '',
                'msg': str(e),
                'type': 'config_error'
            }]


# 全局加载器实例
config_loader = ConfigLoader()


def load_config(config_path: Union[str, Path]) -> PackageDescriptor:
    """便捷函数：加载 package.yml"""
    return config_loader.load_from_file(config_path)


def validate_config(config_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """便捷函数：验证 package.yml"""
    return config_loader.validate_file(config_path)


def generate_config(directory: Union[str, Path]) -> Path:
    """便捷函数：生成 package.yml 模板"""
    return config_loader.write_stub(directory)
