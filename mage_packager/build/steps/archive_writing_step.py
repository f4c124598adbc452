"""
归档写入步骤模块

负责把所有目标文件和清单写入未压缩的中间 tar 文件。
"""

from ...utils import ensure_directory, format_size
from ...utils.logging import info, success, debug, error, LogStage
from mage_packager.build.archive import ArchiveWriter, intermediate_paths
from mage_packager.build.build_context import PackContext, PackError
from .build_step import BuildStep


class ArchiveWritingStep(BuildStep):
    """归档写入步骤"""

    def __init__(self, writer: ArchiveWriter):
        super().__init__("archive", "写入归档")
        self.writer = writer

    def get_progress_range(self) -> tuple[int, int]:
        return (50, 80)

    def execute(self, context: PackContext) -> None:
        """写入 tar 归档"""
        if context.output_path is None or context.manifest_data is None:
            raise PackError("缺少必要的打包数据")

        ensure_directory(context.output_path.parent)
        tar_path, _ = intermediate_paths(context.output_path)
        context.tar_path = tar_path

        info(f"写入归档: {tar_path}", stage=LogStage.ARCHIVE)
        context.report("写入归档", self.get_progress_range()[0], "写入文件...")

        entries = [entry for target in context.targets for entry in target.archive_entries()]
        try:
            count, total_size = self.writer.write_tar(
                tar_path,
                entries,
                context.manifest_data,
                manifest_mtime=context.clock().timestamp(),
            )
        except PackError as e:
            error(f"写入归档失败: {e}", stage=LogStage.ARCHIVE)
            raise

        context.pack_stats['total_size'] = total_size

        context.report("写入归档", self.get_progress_range()[1], f"写入 {count} 个文件")
        success(f"归档写入完成 - 文件: {count}, 原始大小: {format_size(total_size)}", stage=LogStage.ARCHIVE)
        for source_path, archive_name in entries[:20]:
            debug(f"  {archive_name} <- {source_path}", stage=LogStage.ARCHIVE)
