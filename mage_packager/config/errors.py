"""
配置异常定义
"""

import json
from typing import Any, Dict, List, Optional


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误

    只记录第一个不合法的字段，验证在遇到它时即终止。
    """

    def __init__(self, message: str, field: str, value: Optional[Any] = None):
        super().__init__(message)
        self.field = field
        self.value = value

    @property
    def errors(self) -> List[Dict[str, Any]]:
        """以列表形式返回错误（便于表格或 JSON 输出）"""
        error: Dict[str, Any] = {
            'loc': self.field,
            'msg': str(self),
            'type': 'validation_error',
        }
        if self.value is not None:
            error['input'] = self.value
        return [error]

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = f"字段 '{self.field}': {self}"
        if self.value is not None:
            formatted += f"\n  输入值: {self.value}"
        return formatted

    def format_errors_json(self) -> str:
        """格式化错误信息为 JSON 格式"""
        return json.dumps(self.errors, ensure_ascii=False, indent=2, default=str)
