"""
归档压缩步骤模块

负责 gzip 压缩中间 tar 文件。
"""

from ...utils import format_size
from ...utils.logging import info, success, error, LogStage
from mage_packager.build.archive import ArchiveWriter, intermediate_paths
from mage_packager.build.build_context import PackContext, PackError
from .build_step import BuildStep


class CompressionStep(BuildStep):
    """归档压缩步骤"""

    def __init__(self, writer: ArchiveWriter):
        super().__init__("compress", "压缩归档")
        self.writer = writer

    def get_progress_range(self) -> tuple[int, int]:
        return (80, 95)

    def execute(self, context: PackContext) -> None:
        """压缩归档"""
        if context.output_path is None or context.tar_path is None:
            raise PackError("缺少未压缩的归档，无法进行压缩")

        _, compressed_path = intermediate_paths(context.output_path)
        context.compressed_path = compressed_path

        info(f"压缩归档 - gzip 级别: {self.writer.compress_level}", stage=LogStage.COMPRESS)
        context.report("压缩归档", self.get_progress_range()[0], "开始压缩...")

        try:
            compressed_size = self.writer.compress(context.tar_path, compressed_path)
        except PackError as e:
            error(f"压缩失败: {e}", stage=LogStage.COMPRESS)
            raise

        context.pack_stats['compressed_size'] = compressed_size

        context.report("压缩归档", self.get_progress_range()[1], f"压缩完成，大小: {format_size(compressed_size)}")
        success(f"压缩完成 - 大小: {format_size(compressed_size)}", stage=LogStage.COMPRESS)
