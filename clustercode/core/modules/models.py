"""
Value types shared by the scanner and the cleanup pipeline.

Pure dataclasses, no I/O.
"""

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union


@dataclass(frozen=True)
class PriorityLane:
    """A numbered top-level directory of the input root."""
    priority: int
    path: PurePath  # relative to the input root, e.g. Path("1")

    def __post_init__(self):
        if self.priority < 0:
            raise ValueError(f"Lane priority must be non-negative: {self.priority}")


@dataclass(frozen=True)
class MediaCandidate:
    """A file eligible for transcoding."""
    relative_path: PurePath  # includes the leading lane segment
    priority: int

    @property
    def lane_path(self) -> PurePath:
        return PurePath(self.relative_path.parts[0])

    def source_path(self, base_input_dir: Union[str, Path]) -> Path:
        """Absolute location of the source file under *base_input_dir*."""
        return Path(base_input_dir) / self.relative_path


@dataclass(frozen=True)
class TranscodeFinishedEvent:
    """Emitted by the transcoding engine once a candidate has been processed."""
    media: MediaCandidate
    temporary_path: Path
    successful: bool


@dataclass
class CleanupContext:
    """Per-event state threaded through the cleanup pipeline."""
    event: TranscodeFinishedEvent
    output_path: Optional[Path] = None

    @property
    def failed(self) -> bool:
        return not self.event.successful
