"""
Filesystem access used by the scanner and the cleanup stages.

FileSystem is the capability both depend on. LocalFileSystem talks to the
real disk (including network mounts shared by all worker nodes),
MemoryFileSystem keeps a tree in memory so unit tests never touch disk.

All methods raise OSError subclasses on failure; callers translate them into
the worker's own error types.
"""

import errno
import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, List, Set, Union

from ....utils.logging import get_logger

logger = get_logger("filesystem")

PathLike = Union[str, Path]


class FileSystem(ABC):
    """Minimal set of operations the worker core needs."""

    @abstractmethod
    def list_dir(self, path: PathLike) -> List[Path]:
        """Return the immediate children of *path* as absolute paths."""

    @abstractmethod
    def walk_files(self, path: PathLike) -> Iterator[Path]:
        """Yield every regular file below *path*, recursively.

        Any directory that cannot be listed raises instead of being skipped.
        """

    @abstractmethod
    def is_dir(self, path: PathLike) -> bool:
        ...

    @abstractmethod
    def is_file(self, path: PathLike) -> bool:
        ...

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        ...

    @abstractmethod
    def make_dirs(self, path: PathLike) -> None:
        """Create *path* and its parents; an existing directory is not an error."""

    @abstractmethod
    def move(self, source: PathLike, target: PathLike, replace: bool = False) -> None:
        """Move *source* to *target*.

        With replace=False an existing target raises FileExistsError.
        """

    @abstractmethod
    def touch(self, path: PathLike) -> None:
        ...

    @abstractmethod
    def remove(self, path: PathLike) -> None:
        ...


class LocalFileSystem(FileSystem):
    """FileSystem backed by os and shutil."""

    def list_dir(self, path: PathLike) -> List[Path]:
        return [Path(entry.path) for entry in os.scandir(path)]

    def walk_files(self, path: PathLike) -> Iterator[Path]:
        def _raise(exc: OSError):
            raise exc

        for dirpath, _dirnames, filenames in os.walk(path, onerror=_raise):
            for name in filenames:
                candidate = Path(dirpath) / name
                if candidate.is_file():
                    yield candidate

    def is_dir(self, path: PathLike) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def make_dirs(self, path: PathLike) -> None:
        # exist_ok: other nodes may create the same tree concurrently
        os.makedirs(path, exist_ok=True)

    def move(self, source: PathLike, target: PathLike, replace: bool = False) -> None:
        source, target = Path(source), Path(target)
        if not replace:
            if target.exists():
                raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(target))
            shutil.move(str(source), str(target))
            return

        try:
            os.replace(source, target)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            # Different device: copy next to the target, then swap it in.
            partial = target.with_name(f".{target.name}.partial")
            logger.debug(f"Cross-device move, staging through {partial}")
            try:
                shutil.copy2(source, partial)
                os.replace(partial, target)
            except OSError:
                if partial.exists():
                    partial.unlink()
                raise
            source.unlink()

    def touch(self, path: PathLike) -> None:
        Path(path).touch(exist_ok=True)

    def remove(self, path: PathLike) -> None:
        Path(path).unlink()


class MemoryFileSystem(FileSystem):
    """In-memory FileSystem for tests.

    Paths are absolute. Directories registered with deny_read() raise
    PermissionError when listed; directories registered with deny_write()
    refuse new entries below them.
    """

    def __init__(self):
        self.files: Dict[Path, bytes] = {}
        self.dirs: Set[Path] = {Path("/")}
        self._unreadable: Set[Path] = set()
        self._unwritable: Set[Path] = set()

    # -- test setup helpers --------------------------------------------------

    def add_file(self, path: PathLike, content: bytes = b"") -> Path:
        path = Path(path)
        self._add_dirs(path.parent)
        self.files[path] = content
        return path

    def add_dir(self, path: PathLike) -> Path:
        path = Path(path)
        self._add_dirs(path)
        return path

    def read_bytes(self, path: PathLike) -> bytes:
        path = Path(path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        return self.files[path]

    def deny_read(self, path: PathLike) -> None:
        self._unreadable.add(Path(path))

    def deny_write(self, path: PathLike) -> None:
        self._unwritable.add(Path(path))

    def _add_dirs(self, path: Path) -> None:
        for parent in [path, *path.parents]:
            self.dirs.add(parent)

    def _check_readable(self, path: Path) -> None:
        if path in self._unreadable:
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))

    def _check_writable(self, path: Path) -> None:
        for denied in self._unwritable:
            if path == denied or denied in path.parents:
                raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))

    # -- FileSystem ----------------------------------------------------------

    def list_dir(self, path: PathLike) -> List[Path]:
        path = Path(path)
        if path not in self.dirs:
            if path in self.files:
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        self._check_readable(path)
        children = [d for d in self.dirs if d.parent == path and d != path]
        children.extend(f for f in self.files if f.parent == path)
        return sorted(children)

    def walk_files(self, path: PathLike) -> Iterator[Path]:
        for child in self.list_dir(path):
            if child in self.dirs:
                yield from self.walk_files(child)
            else:
                yield child

    def is_dir(self, path: PathLike) -> bool:
        return Path(path) in self.dirs

    def is_file(self, path: PathLike) -> bool:
        return Path(path) in self.files

    def exists(self, path: PathLike) -> bool:
        return self.is_dir(path) or self.is_file(path)

    def make_dirs(self, path: PathLike) -> None:
        path = Path(path)
        if path in self.files:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(path))
        if path in self.dirs:
            return
        self._check_writable(path)
        self._add_dirs(path)

    def move(self, source: PathLike, target: PathLike, replace: bool = False) -> None:
        source, target = Path(source), Path(target)
        if source not in self.files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(source))
        if target.parent not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(target.parent))
        if target in self.dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(target))
        if target in self.files and not replace:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(target))
        self._check_writable(target)
        self.files[target] = self.files.pop(source)

    def touch(self, path: PathLike) -> None:
        path = Path(path)
        if path.parent not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path.parent))
        self._check_writable(path)
        self.files.setdefault(path, b"")

    def remove(self, path: PathLike) -> None:
        path = Path(path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        self._check_writable(path)
        del self.files[path]
