"""
包描述 Schema 定义

使用 Pydantic 定义 package.yml 对应的不可变数据模型。
字段的合法性检查在 validator 中按顺序完成，这里只负责承载验证后的数据。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


# 归档文件后缀
PACKAGE_FILE_SUFFIX = ".tgz"

# 归档内清单文件名（固定）
MANIFEST_FILE_NAME = "package.xml"


class Stability(str, Enum):
    """稳定性枚举"""
    ALPHA = "alpha"
    BETA = "beta"
    STABLE = "stable"


class AuthorModel(BaseModel):
    """作者信息模型"""
    name: str = Field(..., description="作者姓名", min_length=1)
    user: str = Field(..., description="作者账号", min_length=1)
    email: str = Field(..., description="作者邮箱", min_length=1)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


class RequiredPackageModel(BaseModel):
    """依赖包模型"""
    name: str = Field(..., description="依赖包名称", min_length=1)
    channel: str = Field(..., description="依赖包渠道", min_length=1)
    min: Optional[str] = Field(None, description="最低版本")
    max: Optional[str] = Field(None, description="最高版本")

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


class PackageDescriptor(BaseModel):
    """包描述主模型

    对应 package.yml 的全部内容，构造后不可修改。
    """

    name: str = Field(..., description="包名称", min_length=1)
    version: Optional[str] = Field(None, description="版本号")
    stability: Stability = Field(..., description="稳定性")
    license: str = Field(..., description="许可协议", min_length=1)
    channel: str = Field(..., description="发布渠道", min_length=1)
    summary: str = Field(..., description="简要说明", min_length=1)
    description: str = Field(..., description="详细说明", min_length=1)
    notes: Optional[str] = Field(None, description="发布说明")
    authors: Tuple[AuthorModel, ...] = Field(..., description="作者列表", min_length=1)
    php_min_version: str = Field(..., description="PHP 最低版本")
    php_max_version: str = Field(..., description="PHP 最高版本")
    required_packages: Tuple[RequiredPackageModel, ...] = Field(
        default_factory=tuple,
        description="依赖包列表"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @property
    def package_file_name(self) -> str:
        """不含后缀的包文件名：name[-version]"""
        if self.version:
            return f"{self.name}-{self.version}"
        return self.name

    @property
    def archive_name(self) -> str:
        """默认的归档文件名"""
        return self.package_file_name + PACKAGE_FILE_SUFFIX

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式（与 package.yml 字段一致）"""
        data = self.model_dump(exclude_none=True)
        data['stability'] = self.stability.value
        data['authors'] = [author.model_dump() for author in self.authors]
        data['required_packages'] = [package.model_dump() for package in self.required_packages]
        return data
