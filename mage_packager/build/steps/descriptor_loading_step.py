"""
描述文件加载步骤模块

负责定位源目录、加载并验证 package.yml，以及确定输出路径。
"""

import os
from pathlib import Path

from ...config.errors import ConfigError
from ...config.loader import ConfigLoader, DESCRIPTOR_FILE_NAME
from ...utils.logging import info, success, debug, error, LogStage
from mage_packager.build.build_context import PackContext, FilesystemError
from mage_packager.build.archive import resolve_output_path
from .build_step import BuildStep


class DescriptorLoadingStep(BuildStep):
    """描述文件加载步骤"""

    def __init__(self):
        super().__init__("load", "加载包描述文件")
        self.loader = ConfigLoader()

    def get_progress_range(self) -> tuple[int, int]:
        return (0, 10)

    def execute(self, context: PackContext) -> None:
        """加载 package.yml"""
        source_directory = Path(context.source_directory)
        if not source_directory.is_dir():
            source_directory = Path(os.getcwd()) / source_directory
        if not source_directory.is_dir():
            error(f"无效的源目录: {context.source_directory}", stage=LogStage.LOAD)
            raise FilesystemError(f"无效的源目录: {context.source_directory}", context.source_directory)

        source_directory = source_directory.resolve()
        if not os.access(source_directory, os.R_OK | os.X_OK):
            error(f"源目录不可读: {source_directory}", stage=LogStage.LOAD)
            raise FilesystemError(f"源目录不可读: {source_directory}", source_directory)
        context.source_directory = source_directory

        config_path = source_directory / DESCRIPTOR_FILE_NAME
        info(f"加载描述文件: {config_path}", stage=LogStage.LOAD)
        context.report("加载描述", self.get_progress_range()[0], str(config_path))

        try:
            descriptor = self.loader.load_from_file(config_path)
        except ConfigError as e:
            error(f"描述文件无效: {e}", stage=LogStage.LOAD)
            raise
        except OSError as e:
            error(f"无法访问描述文件: {e}", stage=LogStage.LOAD)
            raise FilesystemError(f"无法访问描述文件 {config_path}: {e}", config_path) from e

        context.descriptor = descriptor
        context.output_path = resolve_output_path(source_directory, descriptor, context.output_file)

        context.report("加载描述", self.get_progress_range()[1], descriptor.package_file_name)
        success(f"描述文件加载完成: {descriptor.package_file_name}", stage=LogStage.LOAD)
        debug(f"输出路径: {context.output_path}", stage=LogStage.LOAD)
