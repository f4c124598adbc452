"""
包描述验证器

按固定顺序逐项检查 package.yml 的字段，遇到第一个不合法的字段立即抛出异常，
不做错误汇总。全部通过后构造不可变的 PackageDescriptor。
"""

import re
from typing import Any, List, Mapping, Optional, Sequence

from .errors import ConfigError, ConfigValidationError
from .schema import AuthorModel, PackageDescriptor, RequiredPackageModel, Stability


NAME_PATTERN = re.compile(r'[A-Za-z0-9_-]+')
VERSION_PATTERN = re.compile(r'\d+\.\d+(\.\d+)+')
PHP_VERSION_PATTERN = re.compile(r'\d+\.\d+\.\d+')
REQUIRED_VERSION_PATTERN = re.compile(r'\d+(\.\d+)+')
EMAIL_PATTERN = re.compile(
    r'([a-z0-9+_\-]+)(\.[a-z0-9+_\-]+)*@([a-z0-9\-]+\.)+[a-z]{2,6}',
    re.IGNORECASE
)

STABILITY_VALUES = tuple(item.value for item in Stability)


class DescriptorValidator:
    """包描述验证器（快速失败，第一个错误生效）"""

    def validate(self, data: Any) -> PackageDescriptor:
        """验证原始配置数据

        Args:
            data: 从 package.yml 解析出的字典

        Returns:
            PackageDescriptor: 验证后的包描述

        Raises:
            ConfigError: 配置为空或根级别不是字典
            ConfigValidationError: 第一个不合法的字段
        """
        if not data:
            raise ConfigError("配置内容为空")
        if not isinstance(data, Mapping):
            raise ConfigError("配置文件根级别必须是对象/字典格式")

        name = self._require_pattern(data, 'name', NAME_PATTERN)

        version = None
        if data.get('version') is not None:
            version = self._require_pattern(data, 'version', VERSION_PATTERN)

        stability = self._require(data, 'stability')
        if stability not in STABILITY_VALUES:
            raise self._invalid('stability', stability)

        license_ = self._require(data, 'license')
        channel = self._require(data, 'channel')
        summary = self._require(data, 'summary')
        description = self._require(data, 'description')
        notes = self._text(data.get('notes'), 'notes') or None

        authors = self._validate_authors(data.get('authors'))

        php_min_version = self._require_pattern(data, 'php_min_version', PHP_VERSION_PATTERN)
        php_max_version = self._require_pattern(data, 'php_max_version', PHP_VERSION_PATTERN)

        required_packages = self._validate_required_packages(data.get('required_packages'))

        return PackageDescriptor(
            name=name,
            version=version,
            stability=Stability(stability),
            license=license_,
            channel=channel,
            summary=summary,
            description=description,
            notes=notes,
            authors=tuple(authors),
            php_min_version=php_min_version,
            php_max_version=php_max_version,
            required_packages=tuple(required_packages),
        )

    def _validate_authors(self, authors: Any) -> List[AuthorModel]:
        if not authors or not self._is_sequence(authors):
            raise ConfigValidationError("无效的作者列表 'authors'", 'authors', authors)

        result = []
        for index, author in enumerate(authors):
            prefix = f'authors[{index}]'
            if not isinstance(author, Mapping):
                raise self._invalid(prefix, author)

            author_name = self._require(author, 'name', prefix)
            author_user = self._require_pattern(author, 'user', NAME_PATTERN, prefix)
            author_email = self._require_pattern(author, 'email', EMAIL_PATTERN, prefix)

            result.append(AuthorModel(name=author_name, user=author_user, email=author_email))

        return result

    def _validate_required_packages(self, packages: Any) -> List[RequiredPackageModel]:
        if not packages:
            return []
        if not self._is_sequence(packages):
            raise self._invalid('required_packages', packages)

        result = []
        for index, package in enumerate(packages):
            prefix = f'required_packages[{index}]'
            if not isinstance(package, Mapping):
                raise self._invalid(prefix, package)

            package_name = self._require(package, 'name', prefix)
            package_channel = self._require(package, 'channel', prefix)
            min_version = self._optional_pattern(package, 'min', REQUIRED_VERSION_PATTERN, prefix)
            max_version = self._optional_pattern(package, 'max', REQUIRED_VERSION_PATTERN, prefix)

            result.append(RequiredPackageModel(
                name=package_name,
                channel=package_channel,
                min=min_version,
                max=max_version,
            ))

        return result

    def _require(self, data: Mapping, key: str, prefix: Optional[str] = None) -> str:
        """读取必填文本字段（去除空白后不能为空）"""
        field = self._field(key, prefix)
        value = self._text(data.get(key), field)
        if not value:
            raise ConfigValidationError(f"缺少字段或字段为空 '{field}'", field)
        return value

    def _require_pattern(self, data: Mapping, key: str, pattern: re.Pattern,
                         prefix: Optional[str] = None) -> str:
        value = self._require(data, key, prefix)
        if not pattern.fullmatch(value):
            raise self._invalid(self._field(key, prefix), value)
        return value

    def _optional_pattern(self, data: Mapping, key: str, pattern: re.Pattern,
                          prefix: Optional[str] = None) -> Optional[str]:
        field = self._field(key, prefix)
        value = self._text(data.get(key), field)
        if not value:
            return None
        if not pattern.fullmatch(value):
            raise self._invalid(field, value)
        return value

    def _text(self, value: Any, field: str) -> Optional[str]:
        """将标量值转换为去除空白的字符串

        YAML 会把 1.0 之类的值解析为数字，这里统一转回字符串。
        """
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise self._invalid(field, value)
        return str(value).strip()

    @staticmethod
    def _is_sequence(value: Any) -> bool:
        return isinstance(value, Sequence) and not isinstance(value, str)

    @staticmethod
    def _field(key: str, prefix: Optional[str]) -> str:
        return f'{prefix}.{key}' if prefix else key

    @staticmethod
    def _invalid(field: str, value: Any) -> ConfigValidationError:
        return ConfigValidationError(f"无效的字段 '{field}': \"{value}\"", field, value)


def validate_descriptor(data: Any) -> PackageDescriptor:
    """便捷函数：验证原始配置数据"""
    return DescriptorValidator().validate(data)
