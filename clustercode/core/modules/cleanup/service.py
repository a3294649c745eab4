"""
Builds the cleanup pipeline from configuration and runs it per finished event.
"""

from datetime import datetime
from typing import Callable, List, Optional

from ....config import CleanupConfig
from ....utils.logging import get_logger
from ..models import CleanupContext, TranscodeFinishedEvent
from ..system.filesystem import FileSystem, LocalFileSystem
from .file_relocator import Clock, FileRelocator
from .pipeline import CleanupPipeline
from .processors import (
    delete_source_processor,
    mark_source_processor,
    structured_output_processor,
    unified_output_processor,
)

logger = get_logger("cleanup_service")

OUTPUT_STRATEGIES = ("structured_output", "unified_output")
SOURCE_STRATEGIES = ("mark_source", "delete_source")
STRATEGIES = OUTPUT_STRATEGIES + SOURCE_STRATEGIES

Listener = Callable[[CleanupContext], None]


def build_cleanup_pipeline(config: CleanupConfig, filesystem: Optional[FileSystem] = None,
                           clock: Clock = datetime.now) -> CleanupPipeline:
    """Create the stages named in config.cleanup_strategies, in that order."""
    filesystem = filesystem or LocalFileSystem()

    unknown = [name for name in config.cleanup_strategies if name not in STRATEGIES]
    if unknown:
        raise ValueError(f"Unknown cleanup strategies: {', '.join(unknown)} "
                         f"(choose from {', '.join(STRATEGIES)})")
    outputs = [name for name in config.cleanup_strategies if name in OUTPUT_STRATEGIES]
    if len(outputs) > 1:
        raise ValueError(f"Only one output strategy may be configured, got: {', '.join(outputs)}")
    duplicates = {name for name in config.cleanup_strategies
                  if config.cleanup_strategies.count(name) > 1}
    if duplicates:
        raise ValueError(f"Duplicate cleanup strategies: {', '.join(sorted(duplicates))}")
    if outputs:
        # sources may only be marked or deleted once the result is in the output tree
        output_index = config.cleanup_strategies.index(outputs[0])
        early = [name for name in config.cleanup_strategies[:output_index] if name in SOURCE_STRATEGIES]
        if early:
            raise ValueError(f"{', '.join(early)} must come after {outputs[0]}")

    relocator = FileRelocator(filesystem, clock)
    pipeline = CleanupPipeline()
    for name in config.cleanup_strategies:
        if name == "structured_output":
            stage = structured_output_processor(config, relocator, filesystem)
        elif name == "unified_output":
            stage = unified_output_processor(config, relocator, filesystem)
        elif name == "mark_source":
            stage = mark_source_processor(config, filesystem)
        else:
            stage = delete_source_processor(config, filesystem)
        pipeline.add_stage(name, stage)

    logger.debug(f"Cleanup pipeline: {' -> '.join(pipeline.names) or '(empty)'}")
    return pipeline


class CleanupService:
    """Consumes finished transcode events and reports where the result ended up."""

    def __init__(self, pipeline: CleanupPipeline):
        self.pipeline = pipeline
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Register a callable that receives each completed context with an output path."""
        self._listeners.append(listener)

    def on_transcode_finished(self, event: TranscodeFinishedEvent) -> CleanupContext:
        context = CleanupContext(event=event)
        if not event.successful:
            logger.warn(f"Transcode of {event.media.relative_path} failed, nothing to relocate")

        context = self.pipeline.run(context)

        if context.output_path is not None:
            logger.cleanup(f"Finished {event.media.relative_path}: {context.output_path}")
            for listener in self._listeners:
                listener(context)
        return context
