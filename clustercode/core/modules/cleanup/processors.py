"""
Cleanup stages.

Each factory returns a stage closure for CleanupPipeline. Every stage returns
the context untouched, without filesystem side effects, when the transcode
failed.
"""

from pathlib import Path, PurePath
from typing import Optional

from ....config import CleanupConfig
from ....utils.logging import get_logger
from ..errors import MalformedCandidatePathError, OutputWriteError
from ..models import CleanupContext
from ..system.filesystem import FileSystem
from .file_relocator import FileRelocator
from .pipeline import CleanupStage

logger = get_logger("cleanup")


def _make_dirs(filesystem: FileSystem, path: Path) -> None:
    try:
        filesystem.make_dirs(path)
    except OSError as e:
        raise OutputWriteError(path, e.strerror or str(e)) from e


def strip_lane(relative_path: PurePath) -> PurePath:
    """'0/subdir/file.ext' -> 'subdir/file.ext'"""
    relative_path = PurePath(relative_path)
    if relative_path.is_absolute() or len(relative_path.parts) < 2:
        raise MalformedCandidatePathError(relative_path)
    return PurePath(*relative_path.parts[1:])


def create_output_directory_tree(relative_path: PurePath, base_output_dir: Path,
                                 filesystem: FileSystem) -> Path:
    """
    Mirror *relative_path*, minus its lane directory, under *base_output_dir*.

    Example: "0/subdir/file.ext" with base "/output" returns
    "/output/subdir/file.ext" and creates "/output/subdir". The file itself
    is never created.
    """
    target = Path(base_output_dir) / strip_lane(relative_path)
    _make_dirs(filesystem, target.parent)
    return target


def structured_output_processor(config: CleanupConfig, relocator: FileRelocator,
                                filesystem: Optional[FileSystem] = None) -> CleanupStage:
    """Move the result into the output tree, keeping the source's sub-directories."""
    filesystem = filesystem or relocator.filesystem
    _make_dirs(filesystem, config.base_output_dir)

    def process_step(context: CleanupContext) -> CleanupContext:
        event = context.event
        if context.failed:
            return context

        source = Path(event.temporary_path)
        target = create_output_directory_tree(
            event.media.relative_path, config.base_output_dir, filesystem)

        # the transcoder may have changed the container, so keep its file name
        final_path = target.parent / source.name
        _make_dirs(filesystem, final_path.parent)

        context.output_path = relocator.move(source, final_path, config.overwrite_files)
        logger.output(f"{event.media.relative_path} -> {context.output_path}")
        return context

    return process_step


def unified_output_processor(config: CleanupConfig, relocator: FileRelocator,
                             filesystem: Optional[FileSystem] = None) -> CleanupStage:
    """Move the result straight into the output root, ignoring sub-directories."""
    filesystem = filesystem or relocator.filesystem
    _make_dirs(filesystem, config.base_output_dir)

    def process_step(context: CleanupContext) -> CleanupContext:
        event = context.event
        if context.failed:
            return context

        source = Path(event.temporary_path)
        final_path = Path(config.base_output_dir) / source.name
        context.output_path = relocator.move(source, final_path, config.overwrite_files)
        logger.output(f"{event.media.relative_path} -> {context.output_path}")
        return context

    return process_step


def mark_source_processor(config: CleanupConfig, filesystem: FileSystem) -> CleanupStage:
    """Write the completion marker next to the source so later scans skip it."""

    def process_step(context: CleanupContext) -> CleanupContext:
        if context.failed:
            return context

        source = context.event.media.source_path(config.base_input_dir)
        marker = source.with_name(source.name + config.skip_extension_name)
        if filesystem.exists(marker):
            logger.debug(f"Marker already present: {marker}")
            return context

        try:
            filesystem.touch(marker)
        except OSError as e:
            raise OutputWriteError(marker, e.strerror or str(e)) from e
        logger.cleanup(f"Marked {source.name} as done")
        return context

    return process_step


def delete_source_processor(config: CleanupConfig, filesystem: FileSystem) -> CleanupStage:
    """Delete the source file once its transcode succeeded."""

    def process_step(context: CleanupContext) -> CleanupContext:
        if context.failed:
            return context

        source = context.event.media.source_path(config.base_input_dir)
        if not filesystem.exists(source):
            logger.warn(f"Source already gone: {source}")
            return context

        try:
            filesystem.remove(source)
        except OSError as e:
            raise OutputWriteError(source, e.strerror or str(e)) from e
        logger.cleanup(f"Deleted source {source}")
        return context

    return process_step
