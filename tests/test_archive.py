# Tests for vendorsync.utils.archive
# Archive detection and extraction

import io
import tarfile
import zipfile

import pytest

from vendorsync.utils.archive import extract_archive, is_archive


def _make_tar(path, files: dict[str, bytes], *, mode: str = "w:gz") -> None:
    with tarfile.open(path, mode) as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))


def _make_zip(path, files: dict[str, bytes]) -> None:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)


class TestIsArchive:
    """Tests for is_archive."""

    def test_tar_gz(self, temp_dir):
        path = temp_dir / "a.tgz"
        _make_tar(path, {"x.txt": b"x"})
        assert is_archive(path)

    def test_zip(self, temp_dir):
        path = temp_dir / "a.zip"
        _make_zip(path, {"x.txt": b"x"})
        assert is_archive(path)

    def test_plain_file(self, temp_dir):
        path = temp_dir / "plain.bin"
        path.write_bytes(b"#!/bin/sh\necho hi\n")
        assert not is_archive(path)

    def test_missing(self, temp_dir):
        assert not is_archive(temp_dir / "missing.tar")


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extract_tar(self, temp_dir, tree_files):
        path = temp_dir / "a.tar.gz"
        _make_tar(path, {"bin/tool": b"tool", "README": b"readme"})

        dest = extract_archive(path, temp_dir / "out")

        assert tree_files(dest) == ["README", "bin/tool"]
        assert (dest / "bin" / "tool").read_bytes() == b"tool"

    def test_extract_zip(self, temp_dir, tree_files):
        path = temp_dir / "a.zip"
        _make_zip(path, {"pkg/mod.py": b"x = 1\n"})

        dest = extract_archive(path, temp_dir / "out")

        assert tree_files(dest) == ["pkg/mod.py"]

    def test_tar_traversal_rejected(self, temp_dir):
        path = temp_dir / "evil.tar"
        _make_tar(path, {"../escape.txt": b"x"}, mode="w")

        with pytest.raises(ValueError):
            extract_archive(path, temp_dir / "out")
        assert not (temp_dir / "escape.txt").exists()

    def test_tar_absolute_link_rejected(self, temp_dir):
        path = temp_dir / "evil.tar"
        with tarfile.open(path, "w") as tf:
            info = tarfile.TarInfo("passwd")
            info.type = tarfile.SYMTYPE
            info.linkname = "/etc/passwd"
            tf.addfile(info)

        with pytest.raises(ValueError, match="Refusing to extract"):
            extract_archive(path, temp_dir / "out")
        assert not (temp_dir / "out" / "passwd").is_symlink()

    def test_zip_traversal_rejected(self, temp_dir):
        path = temp_dir / "evil.zip"
        _make_zip(path, {"../escape.txt": b"x"})

        with pytest.raises(ValueError):
            extract_archive(path, temp_dir / "out")
        assert not (temp_dir / "escape.txt").exists()

    def test_unsupported(self, temp_dir):
        path = temp_dir / "plain.txt"
        path.write_text("not an archive")

        with pytest.raises(ValueError, match="Unsupported"):
            extract_archive(path, temp_dir / "out")
