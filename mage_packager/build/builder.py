"""
打包器主类

负责整个打包流程的协调，使用管道模式组织打包步骤。
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..config.errors import ConfigError
from .build_context import Clock, PackError, ProgressCallback
from .build_pipeline import BuildPipeline


@dataclass
class PackResult:
    """打包结果"""
    success: bool
    output_path: Optional[Path] = None
    output_size: Optional[int] = None
    pack_time: Optional[float] = None
    total_files: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class Packager:
    """Magento 扩展打包器

    使用管道模式协调打包步骤，提供统一的打包接口。
    """

    def __init__(self, compress_level: int = 9):
        self.pipeline = BuildPipeline(compress_level)

    def pack(
        self,
        source_directory: Union[str, Path],
        output_file: Optional[Union[str, Path]] = None,
        progress_callback: Optional[ProgressCallback] = None,
        clock: Clock = datetime.now,
    ) -> PackResult:
        """打包目录

        Args:
            source_directory: 源目录（包含 package.yml）
            output_file: 输出文件名或路径（可选）
            progress_callback: 进度回调函数
            clock: 清单中日期和时间的来源

        Returns:
            PackResult: 打包结果，失败时 success 为 False 并带有错误信息
        """
        try:
            context = self.pipeline.execute(source_directory, output_file, progress_callback, clock)
        except (ConfigError, PackError) as e:
            return PackResult(
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )

        output_path = context.output_path
        return PackResult(
            success=True,
            output_path=output_path,
            output_size=output_path.stat().st_size if output_path and output_path.exists() else None,
            pack_time=context.pack_stats['end_time'] - context.pack_stats['start_time'],
            total_files=context.pack_stats['total_files'],
        )

    def get_pipeline(self) -> BuildPipeline:
        """获取打包管道，用于自定义打包流程"""
        return self.pipeline


def pack_directory(
    source_directory: Union[str, Path],
    output_file: Optional[Union[str, Path]] = None,
) -> PackResult:
    """便捷函数：打包目录"""
    return Packager().pack(source_directory, output_file)
