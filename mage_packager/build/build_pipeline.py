"""
打包管道模块

使用管道模式协调打包步骤的执行：
加载描述 -> 扫描目标 -> 生成清单 -> 写入归档 -> 压缩 -> 重命名。
"""

import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..config.errors import ConfigError
from ..utils import format_size
from ..utils.logging import info, success, error, LogStage
from .archive import ArchiveWriter, remove_intermediate_files
from .build_context import Clock, PackContext, PackError, ProgressCallback
from .steps.build_step import BuildStep
from .steps.descriptor_loading_step import DescriptorLoadingStep
from .steps.target_scanning_step import TargetScanningStep
from .steps.manifest_rendering_step import ManifestRenderingStep
from .steps.archive_writing_step import ArchiveWritingStep
from .steps.compression_step import CompressionStep
from .steps.rename_step import RenameStep


class BuildPipeline:
    """打包管道，负责协调打包步骤的执行"""

    def __init__(self, compress_level: int = 9):
        self.writer = ArchiveWriter(compress_level)
        self._steps: List[BuildStep] = []

        self._init_default_steps()

    def _init_default_steps(self):
        self._steps = [
            DescriptorLoadingStep(),
            TargetScanningStep(),
            ManifestRenderingStep(),
            ArchiveWritingStep(self.writer),
            CompressionStep(self.writer),
            RenameStep(self.writer),
        ]

    def add_step(self, step: BuildStep, position: Optional[int] = None):
        """添加打包步骤"""
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, step_name: str):
        """移除打包步骤"""
        self._steps = [step for step in self._steps if step.name != step_name]

    def get_steps(self) -> List[BuildStep]:
        """获取所有打包步骤"""
        return self._steps.copy()

    def execute(
        self,
        source_directory: Union[str, Path],
        output_file: Optional[Union[str, Path]] = None,
        progress_callback: Optional[ProgressCallback] = None,
        clock: Clock = datetime.now,
    ) -> PackContext:
        """执行打包管道

        Args:
            source_directory: 源目录
            output_file: 输出文件名或路径（可选）
            progress_callback: 进度回调函数
            clock: 清单中日期和时间的来源

        Returns:
            PackContext: 打包上下文，包含所有打包结果

        Raises:
            ConfigError: 描述文件缺失或无效
            PackError: 文件系统或归档错误
        """
        context = PackContext(
            source_directory=Path(source_directory),
            output_file=output_file,
            progress_callback=progress_callback,
            clock=clock,
        )

        context.pack_stats['start_time'] = time.time()

        completed = False
        try:
            info(f"开始打包: {source_directory}", stage=LogStage.PACK)

            for step in self._steps:
                info(f"执行步骤: {step.description}", stage=LogStage.PACK)
                step.execute(context)

            completed = True
        except (ConfigError, PackError) as e:
            self._abort(context, e)
            raise
        except Exception as e:
            self._abort(context, e)
            raise PackError(f"打包失败: {e}") from e
        finally:
            # 包括 KeyboardInterrupt 在内，未完成的运行都不留下中间文件
            if not completed:
                remove_intermediate_files(context.intermediate_paths())

        context.pack_stats['end_time'] = time.time()
        pack_time = context.pack_stats['end_time'] - context.pack_stats['start_time']

        success(f"打包成功: {context.output_path}", stage=LogStage.DONE)
        info(f"打包时间: {pack_time:.1f}秒")
        info(f"文件数量: {context.pack_stats['total_files']}")
        info(f"原始大小: {format_size(context.pack_stats['total_size'])}")
        info(f"压缩大小: {format_size(context.pack_stats['compressed_size'])}")

        return context

    def _abort(self, context: PackContext, exc: Exception) -> None:
        """记录失败；中间文件由 execute 的 finally 统一清理"""
        context.pack_stats['end_time'] = time.time()
        error(f"打包失败: {exc}", stage=LogStage.PACK)

    def validate_pipeline(self) -> List[str]:
        """验证打包管道的完整性

        Returns:
            List[str]: 验证错误列表，空列表表示验证通过
        """
        errors = []

        if not self._steps:
            errors.append("打包管道中没有步骤")
            return errors

        # 检查步骤的进度范围是否连续
        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"打包管道的总进度范围不是100%: {prev_end}%")

        return errors
