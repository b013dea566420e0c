# vendorsync Staging Area
# Assembles a directory tree aside and swaps it into place with one rename

import hashlib
import os
from pathlib import Path
from typing import Optional

from vendorsync.errors import DirectoryIOError
from vendorsync.utils.paths import atomic_write, ensure_dir, safe_delete

STAGING_ROOT_PREFIX = ".vendorsync-tmp"


def staging_root_for(destination: str | Path, base: Optional[Path] = None) -> Path:
    """
    Derive the staging root for a destination directory.

    The name is stable per destination, so syncs of different directories
    from the same working tree never share scratch space.

    Args:
        destination: Destination directory being synced.
        base: Directory that holds staging roots (default: cwd).

    Returns:
        Path of the staging root.
    """
    base = base if base is not None else Path.cwd()
    key = os.path.normpath(os.path.abspath(destination))
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
    return base / f"{STAGING_ROOT_PREFIX}-{digest}"


class StagingArea:
    """
    Ephemeral scratch space for one directory sync.

    Layout under the root:
        staging/   tree being assembled; renamed to the destination on commit
        incoming/  per-syncer scratch (checkouts, downloads, unpacked archives)
        previous/  the replaced destination, kept until the root is removed
        borrowed   original locations of borrowed paths not yet committed

    Use as a context manager so the root is removed on every exit path.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.staging_path = self.root / "staging"
        self.incoming_path = self.root / "incoming"
        self.previous_path = self.root / "previous"
        self.borrowed_record = self.root / "borrowed"
        self.committed = False
        self._borrowed: list[tuple[Path, Path]] = []

    def __enter__(self) -> "StagingArea":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            self.end()
        except DirectoryIOError as cleanup_error:
            if exc is None:
                raise
            exc.add_note(f"Staging cleanup also failed: {cleanup_error}")
        return False

    def begin(self) -> None:
        """
        Remove leftovers from a previous run and create fresh subtrees.

        Raises:
            DirectoryIOError: If a previous run left borrowed paths behind,
                              or the staging directories can't be created.
        """
        if self.borrowed_record.exists():
            raise DirectoryIOError(
                "Staging dir holds borrowed contents of an interrupted sync, restore them from", self.root
            )
        self._remove_root()
        self.committed = False
        self._borrowed = []

        for path in (self.root, self.staging_path, self.incoming_path):
            try:
                ensure_dir(path, mode=0o700)
            except OSError as e:
                raise DirectoryIOError("Creating staging dir", path, e) from e

    def stage_path_for(self, content_path: str) -> Path:
        """
        Get the staging location of a content entry, creating its parents.

        Raises:
            DirectoryIOError: If the parent directory can't be created.
        """
        path = self.staging_path / content_path
        try:
            ensure_dir(path.parent, mode=0o700)
        except OSError as e:
            raise DirectoryIOError("Creating directory", path.parent, e) from e
        return path

    def incoming_path_for(self, name: str) -> Path:
        """
        Get a fresh scratch directory under incoming/.

        Raises:
            DirectoryIOError: If the directory can't be created.
        """
        path = self.incoming_path / name
        try:
            if path.exists():
                safe_delete(path)
            ensure_dir(path, mode=0o700)
        except OSError as e:
            raise DirectoryIOError("Creating incoming dir", path, e) from e
        return path

    def borrow(self, source: Path, staged: Path) -> None:
        """
        Move an existing path into the staging tree.

        Until commit, the move is undone when the area is ended.

        Raises:
            DirectoryIOError: If the source is missing or can't be moved.
        """
        if not source.exists() and not source.is_symlink():
            raise DirectoryIOError("Moving directory to staging dir: not found", source)
        try:
            os.rename(source, staged)
        except OSError as e:
            raise DirectoryIOError("Moving directory to staging dir", source, e) from e
        self._borrowed.append((source, staged))
        self._write_borrowed_record()

    def commit(self, final_path: str | Path) -> None:
        """
        Replace the destination with the assembled staging tree.

        The old destination is renamed aside first and moved back if the
        staging tree can't be renamed into place.

        Raises:
            DirectoryIOError: If any rename or directory creation fails.
        """
        # Path() normalizes 'out/in/' so the parent is 'out'
        final = Path(final_path)

        try:
            ensure_dir(final.parent, mode=0o700)
        except OSError as e:
            raise DirectoryIOError("Creating final location parent dir", final.parent, e) from e

        moved_aside = False
        if final.exists() or final.is_symlink():
            try:
                os.rename(final, self.previous_path)
            except OSError as e:
                raise DirectoryIOError("Moving existing directory aside", final, e) from e
            moved_aside = True

        try:
            os.rename(self.staging_path, final)
        except OSError as e:
            if moved_aside:
                try:
                    os.rename(self.previous_path, final)
                except OSError as restore_error:
                    raise DirectoryIOError(
                        f"Restoring previous directory from '{self.previous_path}' after failed commit to",
                        final,
                        restore_error,
                    ) from e
            raise DirectoryIOError(f"Moving staging directory '{self.staging_path}' to final location", final, e) from e

        self.committed = True
        self._borrowed = []
        self._write_borrowed_record()

    def end(self) -> None:
        """
        Remove the whole staging root.

        Borrowed paths are returned first unless the sync was committed.

        Raises:
            DirectoryIOError: If the root or a borrowed path can't be restored or removed.
        """
        if not self.committed:
            while self._borrowed:
                source, staged = self._borrowed[-1]
                if staged.exists() or staged.is_symlink():
                    try:
                        ensure_dir(source.parent)
                        os.rename(staged, source)
                    except OSError as e:
                        self._write_borrowed_record()
                        raise DirectoryIOError(f"Restoring directory from '{staged}' to", source, e) from e
                self._borrowed.pop()
        self._borrowed = []
        self._write_borrowed_record()
        self._remove_root()

    def _write_borrowed_record(self) -> None:
        if not self._borrowed:
            self.borrowed_record.unlink(missing_ok=True)
            return
        lines = "".join(f"{source}\t{staged}\n" for source, staged in self._borrowed)
        try:
            atomic_write(self.borrowed_record, lines)
        except OSError as e:
            raise DirectoryIOError("Recording borrowed paths in", self.borrowed_record, e) from e

    def _remove_root(self) -> None:
        try:
            safe_delete(self.root, missing_ok=True)
        except OSError as e:
            raise DirectoryIOError("Deleting tmp dir", self.root, e) from e
