"""
Final move of a transcoded file into the output tree.

When overwriting is disabled and the destination already exists, the file is
written next to it with a timestamp inserted before the extension:

    /out/show/episode.mkv  ->  /out/show/episode.2024-01-31.14-30-05.mkv

The timestamp has one-second resolution. Two writers targeting the same
destination within the same second can still collide.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ....utils.logging import get_logger
from ..errors import OutputWriteError
from ..system.filesystem import FileSystem, LocalFileSystem

logger = get_logger("file_relocator")

Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = ".%Y-%m-%d.%H-%M-%S"


def timestamped_path(path: Path, moment: datetime) -> Path:
    """Insert the timestamp token for *moment* before the extension of *path*."""
    token = moment.strftime(TIMESTAMP_FORMAT)
    return path.with_name(f"{path.stem}{token}{path.suffix}")


class FileRelocator:
    """Moves files, optionally refusing to overwrite existing ones."""

    def __init__(self, filesystem: Optional[FileSystem] = None, clock: Clock = datetime.now):
        self.filesystem = filesystem or LocalFileSystem()
        self.clock = clock

    def move(self, source: Path, target: Path, overwrite: bool) -> Path:
        """
        Move *source* to *target* and return the path actually written.

        Args:
            source: file to move
            target: desired destination
            overwrite: replace an existing destination instead of renaming

        Raises:
            OutputWriteError: if the move fails
        """
        source, target = Path(source), Path(target)

        if overwrite:
            destination = target
        elif self.filesystem.exists(target):
            destination = timestamped_path(target, self.clock())
            logger.output(f"{target.name} exists, writing {destination.name} instead")
        else:
            destination = target

        try:
            self.filesystem.move(source, destination, replace=overwrite)
        except OSError as e:
            raise OutputWriteError(destination, e.strerror or str(e), source=source) from e

        logger.debug(f"Moved {source} -> {destination}")
        return destination
