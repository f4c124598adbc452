"""
目录树构建

把目标目录下的相对文件路径列表转换为嵌套的目录树，供清单渲染使用。
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Iterator, List, Set, Union


@dataclass
class DirectoryNode:
    """目录节点

    每个子目录由父节点独占持有（名称 -> 节点），子节点的绝对路径
    始终等于父节点路径加上自身名称。
    """
    name: str
    path: Path
    directories: Dict[str, 'DirectoryNode'] = field(default_factory=dict)
    files: Set[str] = field(default_factory=set)

    def child(self, name: str) -> 'DirectoryNode':
        """获取子目录节点，不存在时创建"""
        node = self.directories.get(name)
        if node is None:
            node = DirectoryNode(name=name, path=self.path / name)
            self.directories[name] = node
        return node

    def add_file(self, relative_path: Union[str, PurePosixPath]) -> 'DirectoryNode':
        """按相对路径插入文件，返回文件所在的节点

        重复插入同一路径不会产生额外效果。
        """
        parts = PurePosixPath(relative_path).parts
        if not parts:
            raise ValueError(f"无效的文件路径: {relative_path!r}")

        node = self
        for directory_name in parts[:-1]:
            node = node.child(directory_name)
        node.files.add(parts[-1])
        return node

    def sorted_directories(self) -> List['DirectoryNode']:
        """按名称排序的子目录"""
        return [self.directories[name] for name in sorted(self.directories)]

    def sorted_files(self) -> List[str]:
        """按名称排序的文件名"""
        return sorted(self.files)

    def walk(self) -> Iterator['DirectoryNode']:
        """深度优先遍历（含自身），顺序稳定"""
        yield self
        for directory in self.sorted_directories():
            yield from directory.walk()

    def count_files(self) -> int:
        return sum(len(node.files) for node in self.walk())


class DirectoryTreeBuilder:
    """目录树构建器"""

    def build(self, root_path: Union[str, Path], relative_paths: Iterable[str]) -> DirectoryNode:
        """构建目录树

        Args:
            root_path: 目标目录的绝对路径
            relative_paths: 相对于目标目录的文件路径（正斜杠分隔）

        Returns:
            DirectoryNode: 根节点（名称为空）
        """
        root = DirectoryNode(name="", path=Path(root_path))
        for relative_path in relative_paths:
            root.add_file(relative_path)
        return root


def build_tree(root_path: Union[str, Path], relative_paths: Iterable[str]) -> DirectoryNode:
    """便捷函数：构建目录树"""
    return DirectoryTreeBuilder().build(root_path, relative_paths)
