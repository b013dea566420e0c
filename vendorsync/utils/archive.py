# vendorsync Archive Utilities
# Detection and safe extraction of tar and zip archives

import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from vendorsync.utils.paths import ensure_dir


def is_archive(path: Path) -> bool:
    """
    Check whether a file is a tar (optionally compressed) or zip archive.

    Args:
        path: File to inspect.

    Returns:
        True if the file can be unpacked by extract_archive.
    """
    if not path.is_file():
        return False
    return zipfile.is_zipfile(path) or tarfile.is_tarfile(path)


def _check_zip_member(name: str) -> None:
    member = PurePosixPath(name)
    if member.is_absolute() or ".." in member.parts:
        raise ValueError(f"Refusing to extract zip member outside destination: {name}")


def extract_archive(path: Path, dest: Path, *, tar_filter: str = "data") -> Path:
    """
    Extract an archive into a directory.

    Members that would land outside the destination are rejected.

    Args:
        path: Archive file (tar, tar.gz, tar.bz2, tar.xz or zip).
        dest: Directory to extract into (created if missing).
        tar_filter: Extraction filter for tar members ("data" or "tar").

    Returns:
        The destination directory.

    Raises:
        ValueError: If the file is not a supported archive or has unsafe members.
    """
    ensure_dir(dest)

    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as zf:
            for name in zf.namelist():
                _check_zip_member(name)
            zf.extractall(dest)
        return dest

    if tarfile.is_tarfile(path):
        with tarfile.open(path) as tf:
            try:
                tf.extractall(dest, filter=tar_filter)
            except tarfile.FilterError as e:
                raise ValueError(f"Refusing to extract archive member: {e}") from e
        return dest

    raise ValueError(f"Unsupported archive format: {path}")
