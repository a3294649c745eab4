"""
Cleanup pipeline run after each finished transcode.

A pipeline is an ordered list of named stages. Each stage takes the
CleanupContext and returns it, possibly with output_path set. Stages must
leave the context alone when the transcode failed; the pipeline itself does
not skip them.
"""

from typing import Callable, List, Sequence, Tuple

from ....utils.logging import get_logger
from ..models import CleanupContext

logger = get_logger("cleanup_pipeline")

CleanupStage = Callable[[CleanupContext], CleanupContext]


class CleanupPipeline:
    """Applies cleanup stages in declared order."""

    def __init__(self, stages: Sequence[Tuple[str, CleanupStage]] = ()):
        self._stages: List[Tuple[str, CleanupStage]] = list(stages)

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self._stages]

    def __len__(self) -> int:
        return len(self._stages)

    def add_stage(self, name: str, stage: CleanupStage) -> "CleanupPipeline":
        self._stages.append((name, stage))
        return self

    def run(self, context: CleanupContext) -> CleanupContext:
        media = context.event.media.relative_path
        for name, stage in self._stages:
            logger.debug(f"{name}: {media}")
            try:
                result = stage(context)
            except Exception:
                logger.error(f"Stage '{name}' failed for {media}")
                raise
            if result is None:
                raise TypeError(f"Cleanup stage '{name}' returned None")
            context = result
        return context
