"""
打包上下文模块

定义打包过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING

from ..config.schema import PackageDescriptor

if TYPE_CHECKING:
    from .manifest import ManifestTarget

# 进度回调类型
ProgressCallback = Callable[[str, int, int, str], None]

# 时钟（用于清单中的日期和时间，测试中可替换）
Clock = Callable[[], datetime]


@dataclass
class PackContext:
    """打包上下文，包含一次打包运行中的共享数据"""
    source_directory: Path
    output_file: Optional[Union[str, Path]] = None
    progress_callback: Optional[ProgressCallback] = None
    clock: Clock = datetime.now

    # 打包过程中生成的数据
    descriptor: Optional[PackageDescriptor] = None
    output_path: Optional[Path] = None
    targets: List['ManifestTarget'] = field(default_factory=list)
    manifest_data: Optional[bytes] = None
    tar_path: Optional[Path] = None
    compressed_path: Optional[Path] = None

    # 统计信息
    pack_stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0,
        'end_time': 0,
        'total_files': 0,
        'total_size': 0,
        'compressed_size': 0,
    })

    def report(self, stage: str, current: int, message: str = "") -> None:
        """报告进度（未设置回调时忽略）"""
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)

    def intermediate_paths(self) -> List[Path]:
        """打包过程中产生的中间文件"""
        return [path for path in (self.tar_path, self.compressed_path) if path is not None]


class PackError(Exception):
    """打包错误基类"""
    pass


class FilesystemError(PackError):
    """文件系统错误：源目录或扫描到的文件缺失、不可读"""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class ArchiveError(PackError):
    """归档错误：写入、压缩或重命名输出文件失败"""
    pass
