"""
输出重命名步骤模块

负责把压缩后的归档移动到最终文件名。
"""

from ...utils.logging import info, success, error, LogStage
from mage_packager.build.archive import ArchiveWriter
from mage_packager.build.build_context import PackContext, PackError
from .build_step import BuildStep


class RenameStep(BuildStep):
    """输出重命名步骤"""

    def __init__(self, writer: ArchiveWriter):
        super().__init__("rename", "生成最终包文件")
        self.writer = writer

    def get_progress_range(self) -> tuple[int, int]:
        return (95, 100)

    def execute(self, context: PackContext) -> None:
        """移动到最终位置"""
        if context.output_path is None or context.compressed_path is None:
            raise PackError("缺少压缩后的归档")

        if context.output_path.exists():
            info(f"覆盖已存在的文件: {context.output_path}", stage=LogStage.RENAME)

        try:
            self.writer.finalize(context.compressed_path, context.output_path)
        except PackError as e:
            error(f"生成最终包文件失败: {e}", stage=LogStage.RENAME)
            raise

        context.compressed_path = None
        context.tar_path = None

        context.report("生成包文件", self.get_progress_range()[1], str(context.output_path))
        success(f"包文件已生成: {context.output_path}", stage=LogStage.RENAME)
