"""
清单渲染步骤模块

负责生成 package.xml。
"""

from ...utils import format_size
from ...utils.logging import info, success, debug, error, LogStage
from mage_packager.build.build_context import PackContext, PackError
from mage_packager.build.manifest import ManifestBuilder
from .build_step import BuildStep


class ManifestRenderingStep(BuildStep):
    """清单渲染步骤"""

    def __init__(self):
        super().__init__("manifest", "生成 package.xml")
        self.manifest_builder = ManifestBuilder()

    def get_progress_range(self) -> tuple[int, int]:
        return (30, 50)

    def execute(self, context: PackContext) -> None:
        """渲染清单"""
        if context.descriptor is None:
            raise PackError("缺少包描述，无法生成清单")

        info("生成清单", stage=LogStage.MANIFEST)
        context.report("生成清单", self.get_progress_range()[0], "计算文件校验值...")

        try:
            manifest_data = self.manifest_builder.render(
                context.descriptor,
                context.targets,
                context.clock(),
            )
        except PackError as e:
            error(f"生成清单失败: {e}", stage=LogStage.MANIFEST)
            raise

        context.manifest_data = manifest_data

        context.report("生成清单", self.get_progress_range()[1], "清单生成完成")
        success(f"清单生成完成 - 大小: {format_size(len(manifest_data))}", stage=LogStage.MANIFEST)
        debug(f"清单预览: {manifest_data[:120]!r}...", stage=LogStage.MANIFEST)
