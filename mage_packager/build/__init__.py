"""打包服务模块

提供 Magento 扩展打包的核心功能。
"""

from .builder import Packager, PackResult, pack_directory
from .build_context import PackContext, PackError, FilesystemError, ArchiveError
from .scanner import TargetScanner, ScannedTarget, TARGET_MAP, EXCLUDED_FILES, scan_targets
from .tree import DirectoryNode, DirectoryTreeBuilder, build_tree
from .manifest import (
    ManifestBuilder,
    ManifestTarget,
    HashCalculator,
    MANIFEST_FILE_NAME,
    read_manifest,
)
from .archive import ArchiveWriter, resolve_output_path

__all__ = [
    # 主打包器
    "Packager",
    "PackResult",
    "pack_directory",

    # 上下文与异常
    "PackContext",
    "PackError",
    "FilesystemError",
    "ArchiveError",

    # 目标扫描
    "TargetScanner",
    "ScannedTarget",
    "TARGET_MAP",
    "EXCLUDED_FILES",
    "scan_targets",

    # 目录树
    "DirectoryNode",
    "DirectoryTreeBuilder",
    "build_tree",

    # 清单
    "ManifestBuilder",
    "ManifestTarget",
    "HashCalculator",
    "MANIFEST_FILE_NAME",
    "read_manifest",

    # 归档
    "ArchiveWriter",
    "resolve_output_path",
]
