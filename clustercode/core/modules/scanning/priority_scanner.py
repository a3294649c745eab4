"""
Priority-lane candidate discovery.

The input root is partitioned into numbered lanes:

    <input>/0/show/episode.mkv     lane 0, candidate "0/show/episode.mkv"
    <input>/3/movie.mp4            lane 3, candidate "3/movie.mp4"
    <input>/3/done.mp4.done        marks "3/done.mp4" as already processed
    <input>/incoming/clip.mp4      not a lane, ignored entirely

Each scan walks every lane and returns the eligible files per lane. Lanes
without eligible files are still present in the result so callers can tell an
empty lane from a missing one.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ....config import ScanConfig
from ....utils.logging import get_logger, create_progress_bar
from ..errors import ScanReadError
from ..models import MediaCandidate, PriorityLane
from ..system.filesystem import FileSystem, LocalFileSystem

logger = get_logger("priority_scanner")

# ASCII digits only: "-1", "+1" and unicode digits are not lanes
LANE_NAME = re.compile(r"[0-9]+")


class ScanService(ABC):
    """Source of transcode candidates."""

    @abstractmethod
    def retrieve_files(self) -> Dict[Path, List[MediaCandidate]]:
        """
        Map each lane directory (relative to the input root) to its candidates.

        Blocks until the input tree has been scanned completely. Raises
        ScanReadError instead of returning a partial result.
        """


class PriorityScanner(ScanService):
    """Scans the lanes of the configured input root."""

    def __init__(self, config: ScanConfig, filesystem: Optional[FileSystem] = None,
                 show_progress: bool = False):
        self.config = config
        self.filesystem = filesystem or LocalFileSystem()
        self.show_progress = show_progress

    @property
    def input_root(self) -> Path:
        return self.config.base_input_dir

    def list_lanes(self) -> List[PriorityLane]:
        """Return the lanes directly under the input root, lowest priority number first."""
        try:
            children = self.filesystem.list_dir(self.input_root)
        except OSError as e:
            raise ScanReadError(self.input_root, e.strerror or str(e)) from e

        lanes = []
        for child in children:
            if not LANE_NAME.fullmatch(child.name):
                logger.debug(f"Ignoring non-lane entry: {child.name}")
                continue
            if not self.filesystem.is_dir(child):
                logger.debug(f"Ignoring file with lane-like name: {child.name}")
                continue
            lanes.append(PriorityLane(priority=int(child.name), path=Path(child.name)))

        return sorted(lanes, key=lambda lane: (lane.priority, lane.path))

    def retrieve_files(self) -> Dict[Path, List[MediaCandidate]]:
        lanes = self.list_lanes()
        result: Dict[Path, List[MediaCandidate]] = {}

        with create_progress_bar(total=len(lanes), desc="Scanning lanes", unit="lane",
                                 disable=not self.show_progress) as pbar:
            for lane in lanes:
                result[lane.path] = self._scan_lane(lane)
                pbar.update(1)

        total = sum(len(candidates) for candidates in result.values())
        logger.discovery(f"Found {total} candidate(s) in {len(lanes)} lane(s) under {self.input_root}")
        return result

    def _scan_lane(self, lane: PriorityLane) -> List[MediaCandidate]:
        lane_dir = self.input_root / lane.path
        candidates = []
        try:
            for file_path in self.filesystem.walk_files(lane_dir):
                if self._is_candidate(file_path):
                    candidates.append(MediaCandidate(
                        relative_path=file_path.relative_to(self.input_root),
                        priority=lane.priority,
                    ))
        except OSError as e:
            failed = Path(e.filename) if e.filename else lane_dir
            raise ScanReadError(failed, e.strerror or str(e)) from e

        logger.debug(f"Lane {lane.priority}: {len(candidates)} candidate(s)")
        return candidates

    def _is_candidate(self, file_path: Path) -> bool:
        if file_path.name.endswith(self.config.skip_extension_name):
            return False
        if file_path.suffix.lower() not in self.config.allowed_extensions:
            return False
        marker = file_path.with_name(file_path.name + self.config.skip_extension_name)
        if self.filesystem.exists(marker):
            logger.debug(f"Skipping completed: {file_path.name}")
            return False
        return True
