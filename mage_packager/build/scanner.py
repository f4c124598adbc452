"""
目标扫描器

按固定的目标映射扫描源目录，收集每个目标目录下需要打包的文件。
根目标（mage）排除其他目标目录下的文件以及打包工具自身的文件。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from ..config.loader import DESCRIPTOR_FILE_NAME
from ..config.schema import MANIFEST_FILE_NAME
from ..utils.paths import to_posix
from .build_context import FilesystemError


# 目标代码 -> 相对目录（顺序决定清单和归档中的输出顺序）
TARGET_MAP: Tuple[Tuple[str, str], ...] = (
    ('magelocal', 'app/code/local'),
    ('magecommunity', 'app/code/community'),
    ('magecore', 'app/code/core'),
    ('magedesign', 'app/design'),
    ('mageetc', 'app/etc'),
    ('magelib', 'lib'),
    ('magelocale', 'app/locale'),
    ('magemedia', 'media'),
    ('mageskin', 'skin'),
    ('magetest', 'tests'),
    ('mage', ''),
)

ROOT_TARGET = 'mage'

# 根目标中始终排除的文件（描述文件、生成的清单以及打包工具本身）
EXCLUDED_FILES: Tuple[str, ...] = (
    DESCRIPTOR_FILE_NAME,
    MANIFEST_FILE_NAME,
    'packager.pyz',
    'packager',
)


@dataclass
class ScannedTarget:
    """单个目标的扫描结果"""
    code: str
    relative_directory: str  # 相对于源目录，根目标为空字符串
    root_path: Path  # 目标目录的绝对路径
    files: List[str]  # 相对于目标目录的文件路径（已排序）


class TargetScanner:
    """目标扫描器"""

    def __init__(
        self,
        target_map: Sequence[Tuple[str, str]] = TARGET_MAP,
        excluded_files: Sequence[str] = EXCLUDED_FILES,
    ):
        self.target_map = tuple(target_map)
        self.excluded_files = set(excluded_files)

    def scan(self, source_directory: Union[str, Path]) -> List[ScannedTarget]:
        """扫描所有目标

        目录不存在或过滤后没有文件的目标会被跳过。

        Raises:
            FilesystemError: 源目录不存在或目录不可读
        """
        source_directory = Path(source_directory)
        if not source_directory.is_dir():
            raise FilesystemError(f"无效的源目录: {source_directory}", source_directory)

        targets = []
        for code, relative_directory in self.target_map:
            scanned = self.scan_target(source_directory, code, relative_directory)
            if scanned is not None:
                targets.append(scanned)
        return targets

    def scan_target(self, source_directory: Path, code: str,
                    relative_directory: str) -> Optional[ScannedTarget]:
        """扫描单个目标，目录不存在或为空时返回 None"""
        root_path = source_directory / relative_directory if relative_directory else source_directory
        if not root_path.is_dir():
            return None

        files = list(self._walk(root_path))
        if code == ROOT_TARGET:
            files = [path for path in files if not self._is_excluded_from_root(path)]

        if not files:
            return None

        return ScannedTarget(
            code=code,
            relative_directory=relative_directory,
            root_path=root_path,
            files=sorted(files),
        )

    def _is_excluded_from_root(self, relative_path: str) -> bool:
        if relative_path in self.excluded_files:
            return True

        for code, relative_directory in self.target_map:
            if code == ROOT_TARGET or not relative_directory:
                continue
            if relative_path.startswith(relative_directory.rstrip('/') + '/'):
                return True

        return False

    def _walk(self, directory: Path) -> Iterator[str]:
        """递归遍历目录，返回相对路径；忽略以点开头的文件和目录"""

        def on_error(exc: OSError) -> None:
            raise FilesystemError(f"无法读取目录: {exc.filename}", exc.filename) from exc

        for current, dir_names, file_names in os.walk(directory, onerror=on_error):
            dir_names[:] = [name for name in dir_names if not name.startswith('.')]
            current_path = Path(current)
            for file_name in file_names:
                if file_name.startswith('.'):
                    continue
                file_path = current_path / file_name
                if not file_path.is_file():
                    continue
                yield to_posix(file_path.relative_to(directory))


def scan_targets(source_directory: Union[str, Path]) -> List[ScannedTarget]:
    """便捷函数：扫描所有目标"""
    return TargetScanner().scan(source_directory)
