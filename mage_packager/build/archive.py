"""
归档写入器

负责写入 tar 归档、gzip 压缩以及把压缩结果原子地移动到最终位置。
"""

import gzip
import io
import os
import shutil
import tarfile
import time
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..config.schema import PackageDescriptor
from ..utils.logging import warning, LogStage
from .build_context import ArchiveError, FilesystemError
from .manifest import MANIFEST_FILE_NAME


def resolve_output_path(
    source_directory: Path,
    descriptor: PackageDescriptor,
    output_file: Optional[Union[str, Path]] = None,
) -> Path:
    """确定最终输出路径

    - 未指定时：源目录旁边的 <name>[-<version>].tgz
    - 只给出文件名时：放在源目录旁边
    - 给出路径时：按该路径（相对路径基于当前工作目录）
    """
    if not output_file:
        return source_directory.parent / descriptor.archive_name

    output_path = Path(output_file)
    if output_path.name == str(output_file):
        return source_directory.parent / output_path.name
    return output_path.resolve()


def intermediate_paths(output_path: Path) -> Tuple[Path, Path]:
    """中间文件路径（未压缩 tar，压缩后的 tar.gz），与最终文件位于同一目录"""
    return (
        output_path.parent / f".{output_path.name}.tar",
        output_path.parent / f".{output_path.name}.tar.gz",
    )


class ArchiveWriter:
    """归档写入器"""

    def __init__(self, compress_level: int = 9):
        if not 1 <= compress_level <= 9:
            raise ValueError("gzip 压缩级别必须在 1-9 之间")
        self.compress_level = compress_level

    def write_tar(
        self,
        tar_path: Path,
        entries: Iterable[Tuple[Path, str]],
        manifest_data: bytes,
        manifest_mtime: Optional[float] = None,
    ) -> Tuple[int, int]:
        """写入未压缩的 tar 归档

        Args:
            tar_path: 输出路径
            entries: (源文件路径, 归档内路径)
            manifest_data: package.xml 内容
            manifest_mtime: 清单条目的修改时间，默认为当前时间

        Returns:
            Tuple[int, int]: 写入的文件条目数和原始总大小（均不含清单）

        Raises:
            FilesystemError: 源文件缺失或不可读
            ArchiveError: 写入归档失败
        """
        count = 0
        total_size = 0
        try:
            with tarfile.open(tar_path, 'w') as archive:
                for source_path, archive_name in entries:
                    total_size += self._add_file(archive, source_path, archive_name)
                    count += 1

                info = tarfile.TarInfo(MANIFEST_FILE_NAME)
                info.size = len(manifest_data)
                info.mtime = int(manifest_mtime if manifest_mtime is not None else time.time())
                info.mode = 0o644
                archive.addfile(info, io.BytesIO(manifest_data))
        except (tarfile.TarError, OSError) as e:
            raise ArchiveError(f"写入归档失败 {tar_path}: {e}") from e

        return count, total_size

    def _add_file(self, archive: tarfile.TarFile, source_path: Path, archive_name: str) -> int:
        try:
            with open(source_path, 'rb') as f:
                info = archive.gettarinfo(arcname=archive_name, fileobj=f)
                archive.addfile(info, f)
                return info.size
        except OSError as e:
            raise FilesystemError(f"读取文件失败 {source_path}: {e}", source_path) from e

    def compress(self, tar_path: Path, compressed_path: Path) -> int:
        """gzip 压缩归档，成功后删除未压缩文件

        Returns:
            int: 压缩后的大小（字节）

        Raises:
            ArchiveError: 压缩失败
        """
        try:
            with open(tar_path, 'rb') as source, \
                    gzip.open(compressed_path, 'wb', compresslevel=self.compress_level) as target:
                shutil.copyfileobj(source, target)
            tar_path.unlink()
            return compressed_path.stat().st_size
        except OSError as e:
            raise ArchiveError(f"压缩归档失败 {tar_path}: {e}") from e

    def finalize(self, compressed_path: Path, output_path: Path) -> None:
        """原子地移动到最终位置（已存在时覆盖）

        Raises:
            ArchiveError: 重命名失败
        """
        try:
            os.replace(compressed_path, output_path)
        except OSError as e:
            raise ArchiveError(f"重命名输出文件失败 {output_path}: {e}") from e


def remove_intermediate_files(paths: Iterable[Path]) -> None:
    """删除中间文件（失败时仅记录警告）"""
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            warning(f"无法删除中间文件 {path}: {e}", stage=LogStage.PACK)
