"""
清单构建器和哈希工具

负责把包描述和各目标的目录树渲染为 package.xml，并计算每个文件的校验值。
"""

import hashlib
import tarfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from ..config.schema import MANIFEST_FILE_NAME, PackageDescriptor
from ..utils.paths import join_archive_path
from .build_context import ArchiveError, FilesystemError
from .scanner import ScannedTarget
from .tree import DirectoryNode, DirectoryTreeBuilder


XML_DECLARATION = '<?xml version="1.0"?>\n'


class HashCalculator:
    """文件校验值计算器

    校验值只用于检测内容变化，不承担安全用途。
    """

    def __init__(self, algorithm: str = "md5"):
        self.algorithm = algorithm.lower()
        if self.algorithm not in hashlib.algorithms_available:
            raise ValueError(f"不支持的哈希算法: {algorithm}")

        self._hasher = hashlib.new(self.algorithm, usedforsecurity=False)

    def update(self, data: bytes) -> None:
        self._hasher.update(data)

    def update_from_file(self, file_path: Path, chunk_size: int = 64 * 1024) -> None:
        """从文件更新哈希

        Raises:
            FilesystemError: 文件缺失或读取失败
        """
        try:
            with open(file_path, 'rb') as f:
                while True:
                    chunk = f.read(chunk_size)
                    if not chunk:
                        break
                    self._hasher.update(chunk)
        except OSError as e:
            raise FilesystemError(f"读取文件失败 {file_path}: {e}", file_path) from e

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()

    @classmethod
    def hash_file(cls, file_path: Path, algorithm: str = "md5") -> str:
        """便捷方法：计算文件校验值"""
        calculator = cls(algorithm)
        calculator.update_from_file(file_path)
        return calculator.hexdigest()


@dataclass
class ManifestTarget:
    """清单中的一个目标：目标代码及其目录树"""
    code: str
    relative_directory: str
    root_path: Path
    files: List[str]
    tree: DirectoryNode

    @classmethod
    def from_scan(cls, scanned: ScannedTarget,
                  tree_builder: Optional[DirectoryTreeBuilder] = None) -> 'ManifestTarget':
        """由扫描结果构建目录树"""
        tree_builder = tree_builder or DirectoryTreeBuilder()
        return cls(
            code=scanned.code,
            relative_directory=scanned.relative_directory,
            root_path=scanned.root_path,
            files=list(scanned.files),
            tree=tree_builder.build(scanned.root_path, scanned.files),
        )

    def archive_entries(self) -> Iterator[Tuple[Path, str]]:
        """(源文件路径, 归档内路径)"""
        for relative_path in self.files:
            yield self.root_path / relative_path, join_archive_path(self.relative_directory, relative_path)


class ManifestBuilder:
    """清单构建器"""

    def __init__(self, hash_algorithm: str = "md5"):
        self.hash_algorithm = hash_algorithm

    def build_document(
        self,
        descriptor: PackageDescriptor,
        targets: Sequence[ManifestTarget],
        now: datetime,
    ) -> ET.Element:
        """构建清单 XML 元素树

        Raises:
            FilesystemError: 计算校验值时文件缺失或不可读
        """
        package = ET.Element('package')

        self._add_text(package, 'name', descriptor.name)
        if descriptor.version:
            self._add_text(package, 'version', descriptor.version)
        self._add_text(package, 'stability', descriptor.stability.value)
        self._add_text(package, 'license', descriptor.license)
        self._add_text(package, 'channel', descriptor.channel)
        ET.SubElement(package, 'extends')
        self._add_text(package, 'summary', descriptor.summary)
        self._add_text(package, 'description', descriptor.description)
        if descriptor.notes:
            self._add_text(package, 'notes', descriptor.notes)

        authors = ET.SubElement(package, 'authors')
        for author in descriptor.authors:
            author_element = ET.SubElement(authors, 'author')
            self._add_text(author_element, 'name', author.name)
            self._add_text(author_element, 'user', author.user)
            self._add_text(author_element, 'email', author.email)

        self._add_text(package, 'date', now.strftime('%Y-%m-%d'))
        self._add_text(package, 'time', now.strftime('%H:%M:%S'))

        contents = ET.SubElement(package, 'contents')
        for target in targets:
            target_element = ET.SubElement(contents, 'target', {'name': target.code})
            self._add_directory_contents(target_element, target.tree)

        ET.SubElement(package, 'compatible')

        dependencies = ET.SubElement(package, 'dependencies')
        required = ET.SubElement(dependencies, 'required')
        php = ET.SubElement(required, 'php')
        self._add_text(php, 'min', descriptor.php_min_version)
        self._add_text(php, 'max', descriptor.php_max_version)
        for required_package in descriptor.required_packages:
            package_element = ET.SubElement(required, 'package')
            self._add_text(package_element, 'name', required_package.name)
            self._add_text(package_element, 'channel', required_package.channel)
            self._add_text(package_element, 'min', required_package.min)
            self._add_text(package_element, 'max', required_package.max)

        return package

    def render(
        self,
        descriptor: PackageDescriptor,
        targets: Sequence[ManifestTarget],
        now: datetime,
    ) -> bytes:
        """渲染 package.xml 内容"""
        document = self.build_document(descriptor, targets, now)
        ET.indent(document)
        body = ET.tostring(document, encoding='unicode')
        return (XML_DECLARATION + body + '\n').encode('utf-8')

    def _add_directory_contents(self, parent: ET.Element, node: DirectoryNode) -> None:
        # 先子目录后文件，均按名称排序
        for directory in node.sorted_directories():
            directory_element = ET.SubElement(parent, 'dir', {'name': directory.name})
            self._add_directory_contents(directory_element, directory)

        for file_name in node.sorted_files():
            file_hash = HashCalculator.hash_file(node.path / file_name, self.hash_algorithm)
            ET.SubElement(parent, 'file', {'name': file_name, 'hash': file_hash})

    @staticmethod
    def _add_text(parent: ET.Element, tag: str, value: Optional[str]) -> ET.Element:
        element = ET.SubElement(parent, tag)
        if value is not None:
            element.text = value
        return element


def read_manifest(archive_path: Union[str, Path]) -> Dict[str, Any]:
    """从已生成的包中读取清单摘要

    Returns:
        Dict: 元数据字段、作者、依赖以及每个目标的文件列表

    Raises:
        ArchiveError: 包文件无法打开或缺少清单
    """
    try:
        with tarfile.open(archive_path, 'r:*') as archive:
            member = archive.extractfile(MANIFEST_FILE_NAME)
            if member is None:
                raise ArchiveError(f"{MANIFEST_FILE_NAME} 不是普通文件: {archive_path}")
            with member:
                raw_manifest = member.read()
    except KeyError as e:
        raise ArchiveError(f"包中缺少 {MANIFEST_FILE_NAME}: {archive_path}") from e
    except (tarfile.TarError, OSError) as e:
        raise ArchiveError(f"无法读取包文件 {archive_path}: {e}") from e

    try:
        package = ET.fromstring(raw_manifest)
    except ET.ParseError as e:
        raise ArchiveError(f"{MANIFEST_FILE_NAME} 解析错误: {e}") from e

    summary: Dict[str, Any] = {}
    for tag in ('name', 'version', 'stability', 'license', 'channel',
                'summary', 'description', 'notes', 'date', 'time'):
        element = package.find(tag)
        if element is not None:
            summary[tag] = element.text or ''

    summary['authors'] = [
        {child.tag: child.text or '' for child in author}
        for author in package.iterfind('authors/author')
    ]

    php = package.find('dependencies/required/php')
    if php is not None:
        summary['php'] = {
            'min': php.findtext('min', ''),
            'max': php.findtext('max', ''),
        }
    summary['required_packages'] = [
        {child.tag: child.text for child in required_package}
        for required_package in package.iterfind('dependencies/required/package')
    ]

    summary['targets'] = [
        {'name': target.get('name', ''), 'files': _collect_manifest_files(target, '')}
        for target in package.iterfind('contents/target')
    ]

    return summary


def _collect_manifest_files(element: ET.Element, prefix: str) -> List[Dict[str, str]]:
    files = []
    for child in element:
        name = child.get('name', '')
        if child.tag == 'dir':
            files.extend(_collect_manifest_files(child, f"{prefix}{name}/"))
        elif child.tag == 'file':
            files.append({'path': prefix + name, 'hash': child.get('hash', '')})
    return files
