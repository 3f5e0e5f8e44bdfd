"""
Workspace-scoped file store.

Every path handed to the workspace is resolved against a single root and
rejected with SandboxViolation unless it stays inside that root.
"""

import logging
import shutil
from pathlib import Path

from .exceptions import AlreadyExistsError, InvalidOperationError, NotFoundError, SandboxViolation

logger = logging.getLogger(__name__)


class Workspace:
    """
    Sandboxed file store rooted at a single directory.

    The root is canonicalized (and created) on construction. All operations
    take workspace-relative paths.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the workspace.

        Args:
            root: Workspace root directory (created if missing)
        """
        root_path = Path(root).expanduser()
        root_path.mkdir(parents=True, exist_ok=True)
        self.root = root_path.resolve()
        self._protected: set[Path] = set()

    def resolve(self, path: str | Path) -> Path:
        """
        Resolve a workspace-relative path to its canonical absolute form.

        Symlinks and ``..`` segments are resolved before the containment
        check, and absolute paths are only accepted if they land inside the root.

        Args:
            path: Path relative to the workspace root

        Returns:
            Canonical absolute path inside the workspace

        Raises:
            SandboxViolation: If the canonical path is outside the root
        """
        try:
            candidate = (self.root / path).resolve()
        except (OSError, RuntimeError, ValueError) as e:
            raise SandboxViolation(str(path), str(self.root)) from e

        if candidate != self.root and self.root not in candidate.parents:
            logger.warning("Sandbox violation: %s resolves to %s", path, candidate)
            raise SandboxViolation(str(path), str(self.root))
        return candidate

    def protect(self, path: str | Path) -> None:
        """
        Mark a file as off limits to write, create and delete.

        Deleting a directory that contains a protected file is refused as well.
        """
        self._protected.add(self.resolve(path))

    def is_protected(self, path: str | Path) -> bool:
        """
        Whether modifying path would touch a protected file.

        Raises:
            SandboxViolation: If the path escapes the workspace
        """
        target = self.resolve(path)
        return any(target == p or target in p.parents for p in self._protected)

    def _check_modifiable(self, path: str | Path) -> Path:
        target = self.resolve(path)
        if self.is_protected(target):
            raise InvalidOperationError(f"Refusing to modify protected path: {self.relative(target)}")
        return target

    def relative(self, path: Path) -> str:
        """Return a canonical path relative to the root, with POSIX separators."""
        return path.relative_to(self.root).as_posix()

    def file_exists(self, path: str | Path) -> bool:
        return self.resolve(path).is_file()

    def directory_exists(self, path: str | Path) -> bool:
        return self.resolve(path).is_dir()

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).exists()

    def file_size(self, path: str | Path) -> int:
        """Size in bytes of an existing file, 0 if it is missing."""
        target = self.resolve(path)
        if not target.is_file():
            return 0
        return target.stat().st_size

    def read_file(self, path: str | Path) -> str:
        """
        Read a UTF-8 text file.

        Raises:
            NotFoundError: If the file does not exist
        """
        target = self.resolve(path)
        if not target.is_file():
            raise NotFoundError("File", str(path))
        return target.read_text(encoding="utf-8")

    def write_file(self, path: str | Path, content: str) -> None:
        """
        Write (or overwrite) a file, creating parent directories as needed.

        Raises:
            InvalidOperationError: If the path is protected
        """
        target = self._check_modifiable(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def create_file(self, path: str | Path, content: str) -> None:
        """
        Create a new file.

        Raises:
            AlreadyExistsError: If something already exists at the path
            InvalidOperationError: If the path is protected
        """
        self._check_modifiable(path)
        if self.exists(path):
            raise AlreadyExistsError("File", str(path))
        self.write_file(path, content)

    def delete(self, path: str | Path) -> None:
        """
        Delete a file, or a directory recursively.

        Raises:
            NotFoundError: If neither a file nor a directory exists at the path
            InvalidOperationError: For the workspace root or a protected path
        """
        target = self.resolve(path)
        if target == self.root:
            raise InvalidOperationError("Refusing to delete the workspace root")
        self._check_modifiable(target)
        if target.is_file():
            target.unlink()
        elif target.is_dir():
            shutil.rmtree(target)
        else:
            raise NotFoundError("File or directory", str(path))

    def list_dir(self, path: str | Path = ".") -> list[str]:
        """
        List the entries directly under a directory.

        Returns:
            Sorted workspace-relative paths; empty if the directory is absent
        """
        target = self.resolve(path)
        if not target.is_dir():
            return []
        return sorted(self.relative(child) for child in target.iterdir())
