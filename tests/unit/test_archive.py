"""
归档写入器单元测试
"""

import gzip
import tarfile
from unittest.mock import patch

import pytest

from mage_packager.build.archive import (
    ArchiveWriter,
    intermediate_paths,
    remove_intermediate_files,
    resolve_output_path,
)
from mage_packager.build.build_context import ArchiveError, FilesystemError
from mage_packager.config import validate_descriptor


class TestResolveOutputPath:
    """resolve_output_path 测试"""

    def test_default_name(self, tmp_path, descriptor_data):
        """测试默认输出到源目录旁边"""
        source = tmp_path / "Foo_Bar"
        descriptor = validate_descriptor(descriptor_data)

        assert resolve_output_path(source, descriptor) == tmp_path / "Foo_Bar-1.0.0.tgz"

    def test_default_name_without_version(self, tmp_path, descriptor_data):
        """测试未设置版本时的默认文件名"""
        del descriptor_data['version']
        source = tmp_path / "Foo_Bar"

        assert resolve_output_path(source, validate_descriptor(descriptor_data)) == tmp_path / "Foo_Bar.tgz"

    def test_bare_file_name(self, tmp_path, descriptor_data):
        """测试只给出文件名时放在源目录旁边"""
        source = tmp_path / "Foo_Bar"
        descriptor = validate_descriptor(descriptor_data)

        assert resolve_output_path(source, descriptor, "custom.tgz") == tmp_path / "custom.tgz"

    def test_explicit_path(self, tmp_path, descriptor_data):
        """测试给出完整路径"""
        source = tmp_path / "Foo_Bar"
        target = tmp_path / "dist" / "out.tgz"
        descriptor = validate_descriptor(descriptor_data)

        assert resolve_output_path(source, descriptor, str(target)) == target.resolve()

    def test_relative_path_uses_cwd(self, tmp_path, descriptor_data, monkeypatch):
        """测试相对路径基于当前工作目录"""
        monkeypatch.chdir(tmp_path)
        source = tmp_path / "src" / "Foo_Bar"
        descriptor = validate_descriptor(descriptor_data)

        result = resolve_output_path(source, descriptor, "dist/out.tgz")

        assert result == (tmp_path / "dist" / "out.tgz").resolve()

    def test_intermediate_paths(self, tmp_path):
        """测试中间文件与最终文件位于同一目录"""
        tar_path, compressed_path = intermediate_paths(tmp_path / "Foo_Bar-1.0.0.tgz")

        assert tar_path == tmp_path / ".Foo_Bar-1.0.0.tgz.tar"
        assert compressed_path == tmp_path / ".Foo_Bar-1.0.0.tgz.tar.gz"


class TestArchiveWriter:
    """ArchiveWriter 测试"""

    @pytest.fixture
    def source_file(self, tmp_path):
        path = tmp_path / "Bar.php"
        path.write_bytes(b"<?php\n")
        return path

    def test_invalid_compress_level(self):
        """测试压缩级别范围"""
        with pytest.raises(ValueError):
            ArchiveWriter(compress_level=0)
        with pytest.raises(ValueError):
            ArchiveWriter(compress_level=10)

    def test_write_tar(self, tmp_path, source_file):
        """测试写入 tar，清单作为最后一个条目"""
        tar_path = tmp_path / "out.tar"

        count, total_size = ArchiveWriter().write_tar(
            tar_path,
            [(source_file, "app/code/local/Foo/Bar.php")],
            b"<package/>",
            manifest_mtime=1700000000,
        )

        assert count == 1
        assert total_size == len(b"<?php\n")
        with tarfile.open(tar_path) as archive:
            members = archive.getmembers()
            assert [member.name for member in members] == ["app/code/local/Foo/Bar.php", "package.xml"]
            assert members[1].mtime == 1700000000
            assert archive.extractfile("package.xml").read() == b"<package/>"
            assert archive.extractfile("app/code/local/Foo/Bar.php").read() == b"<?php\n"

    def test_write_tar_missing_source(self, tmp_path):
        """测试源文件缺失"""
        with pytest.raises(FilesystemError) as exc_info:
            ArchiveWriter().write_tar(
                tmp_path / "out.tar",
                [(tmp_path / "missing.php", "missing.php")],
                b"<package/>",
            )

        assert exc_info.value.path == tmp_path / "missing.php"

    def test_write_tar_unwritable_target(self, tmp_path, source_file):
        """测试输出目录不存在"""
        with pytest.raises(ArchiveError):
            ArchiveWriter().write_tar(tmp_path / "missing" / "out.tar", [], b"<package/>")

    def test_compress(self, tmp_path, source_file):
        """测试压缩后删除未压缩文件"""
        writer = ArchiveWriter()
        tar_path = tmp_path / "out.tar"
        compressed_path = tmp_path / "out.tar.gz"
        writer.write_tar(tar_path, [(source_file, "Bar.php")], b"<package/>")
        raw = tar_path.read_bytes()

        compressed_size = writer.compress(tar_path, compressed_path)

        assert not tar_path.exists()
        assert compressed_size == compressed_path.stat().st_size
        with gzip.open(compressed_path, 'rb') as f:
            assert f.read() == raw

    def test_compress_missing_tar(self, tmp_path):
        """测试未压缩文件不存在"""
        with pytest.raises(ArchiveError):
            ArchiveWriter().compress(tmp_path / "missing.tar", tmp_path / "out.tar.gz")

    def test_finalize_overwrites(self, tmp_path):
        """测试最终文件已存在时被覆盖"""
        compressed_path = tmp_path / ".out.tgz.tar.gz"
        output_path = tmp_path / "out.tgz"
        compressed_path.write_bytes(b"new")
        output_path.write_bytes(b"old")

        ArchiveWriter().finalize(compressed_path, output_path)

        assert output_path.read_bytes() == b"new"
        assert not compressed_path.exists()

    def test_finalize_failure(self, tmp_path):
        """测试重命名失败"""
        with pytest.raises(ArchiveError):
            ArchiveWriter().finalize(tmp_path / "missing.tar.gz", tmp_path / "out.tgz")


class TestRemoveIntermediateFiles:
    """remove_intermediate_files 测试"""

    def test_removes_existing_and_ignores_missing(self, tmp_path):
        """测试删除存在的文件并忽略不存在的文件"""
        existing = tmp_path / ".out.tgz.tar"
        existing.write_bytes(b"data")

        remove_intermediate_files([existing, tmp_path / ".out.tgz.tar.gz"])

        assert not existing.exists()

    def test_unlink_failure_is_logged(self, tmp_path):
        """测试删除失败时只记录警告"""
        path = tmp_path / ".out.tgz.tar"
        path.write_bytes(b"data")

        with patch('mage_packager.build.archive.warning') as mock_warning, \
                patch.object(type(path), 'unlink', side_effect=PermissionError("denied")):
            remove_intermediate_files([path])

        mock_warning.assert_called_once()
