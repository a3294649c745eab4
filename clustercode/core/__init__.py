"""Core scanning and cleanup modules.

Re-exports the pieces an embedding scheduler needs.
"""

from .modules.models import CleanupContext, MediaCandidate, PriorityLane, TranscodeFinishedEvent
from .modules.errors import ClustercodeError, MalformedCandidatePathError, OutputWriteError, ScanReadError
from .modules.scanning.priority_scanner import PriorityScanner, ScanService
from .modules.cleanup.pipeline import CleanupPipeline
from .modules.cleanup.service import CleanupService, build_cleanup_pipeline

__all__ = [
    "CleanupContext",
    "MediaCandidate",
    "PriorityLane",
    "TranscodeFinishedEvent",
    "ClustercodeError",
    "MalformedCandidatePathError",
    "OutputWriteError",
    "ScanReadError",
    "PriorityScanner",
    "ScanService",
    "CleanupPipeline",
    "CleanupService",
    "build_cleanup_pipeline",
]
