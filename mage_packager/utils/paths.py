"""
路径工具

提供路径处理相关的工具函数。
"""

from pathlib import Path, PurePath
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """确保目录存在

    Args:
        path: 目录路径

    Returns:
        Path: 目录路径
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def to_posix(path: Union[str, PurePath]) -> str:
    """转换为使用正斜杠的相对路径字符串（归档内路径与清单统一使用）"""
    return PurePath(path).as_posix()


def join_archive_path(prefix: str, relative_path: str) -> str:
    """拼接归档内路径

    Args:
        prefix: 目标对应的相对目录，根目标为空字符串
        relative_path: 文件相对于目标目录的路径

    Returns:
        str: 归档内路径
    """
    if not prefix:
        return relative_path
    return f"{prefix.rstrip('/')}/{relative_path}"


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"
