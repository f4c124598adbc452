"""
目标扫描步骤模块

负责按目标映射收集文件并为每个目标构建目录树。
"""

from ...utils.logging import info, success, debug, error, LogStage
from mage_packager.build.build_context import PackContext, PackError
from mage_packager.build.manifest import ManifestTarget
from mage_packager.build.scanner import TargetScanner
from mage_packager.build.tree import DirectoryTreeBuilder
from .build_step import BuildStep


class TargetScanningStep(BuildStep):
    """目标扫描步骤"""

    def __init__(self):
        super().__init__("scan", "扫描目标目录")
        self.scanner = TargetScanner()
        self.tree_builder = DirectoryTreeBuilder()

    def get_progress_range(self) -> tuple[int, int]:
        return (10, 30)

    def execute(self, context: PackContext) -> None:
        """扫描所有目标"""
        if context.descriptor is None:
            raise PackError("缺少包描述，无法扫描目标")

        info(f"扫描源目录: {context.source_directory}", stage=LogStage.SCAN)
        context.report("扫描目标", self.get_progress_range()[0], str(context.source_directory))

        try:
            scanned_targets = self.scanner.scan(context.source_directory)
        except PackError as e:
            error(f"扫描失败: {e}", stage=LogStage.SCAN)
            raise

        context.targets = [
            ManifestTarget.from_scan(scanned, self.tree_builder)
            for scanned in scanned_targets
        ]

        total_files = 0
        for target in context.targets:
            total_files += len(target.files)
            info(f"  {target.code}: {len(target.files)} 个文件", stage=LogStage.SCAN)
            for relative_path in target.files[:20]:
                debug(f"  {target.code}/{relative_path}", stage=LogStage.SCAN)
            if len(target.files) > 20:
                debug(f"  ... 还有 {len(target.files) - 20} 个文件未列出", stage=LogStage.SCAN)

        context.pack_stats['total_files'] = total_files

        context.report("扫描目标", self.get_progress_range()[1], f"找到 {total_files} 个文件")
        success(f"扫描完成 - 目标: {len(context.targets)}, 文件: {total_files}", stage=LogStage.SCAN)
