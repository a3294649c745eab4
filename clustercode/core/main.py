"""
Command line entry points for the worker core.

clustercode-scan     list the transcode candidates per priority lane
clustercode-cleanup  relocate one finished transcode into the output tree
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from ..config import CleanupConfig, ScanConfig, get_config, normalize_extensions
from ..utils.logging import get_logger, print_separator, set_debug_mode, set_log_level
from .modules.cleanup.service import STRATEGIES, CleanupService, build_cleanup_pipeline
from .modules.errors import ClustercodeError
from .modules.models import MediaCandidate, TranscodeFinishedEvent
from .modules.scanning.priority_scanner import LANE_NAME, PriorityScanner

logger = get_logger()


def _configure_logging(config: dict, debug: bool) -> None:
    set_log_level(config['log_level'])
    if debug or config['debug']:
        set_debug_mode(True)


def _format_scan(result: Dict[Path, List[MediaCandidate]]) -> dict:
    return {
        str(lane): [c.relative_path.as_posix() for c in candidates]
        for lane, candidates in sorted(result.items(), key=lambda item: int(item[0].name))
    }


def build_scan_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List transcode candidates per priority lane")
    ap.add_argument("--input", type=Path, default=None, help="Input root containing numbered lane directories")
    ap.add_argument("--exts", default=None, help="Comma-separated extension whitelist (e.g. mkv,mp4)")
    ap.add_argument("--marker", default=None, help="Completion marker suffix (default: .done)")
    ap.add_argument("--json", action="store_true", help="Print the result as JSON")
    ap.add_argument("--progress", action="store_true", help="Show a progress bar while scanning lanes")
    ap.add_argument("--env", type=Path, default=None, help="Path to a .env configuration file")
    ap.add_argument("--debug", action="store_true", help="Show debug output")
    return ap


def main_scan(argv: Optional[List[str]] = None) -> int:
    args = build_scan_parser().parse_args(argv)
    config = get_config(args.env)
    _configure_logging(config, args.debug)

    if args.input is not None:
        config['base_input_dir'] = args.input
    if args.exts is not None:
        config['allowed_extensions'] = normalize_extensions(args.exts)
    if args.marker is not None:
        config['skip_extension_name'] = args.marker

    scanner = PriorityScanner(ScanConfig.from_config(config), show_progress=args.progress)
    try:
        result = scanner.retrieve_files()
    except ClustercodeError as e:
        logger.error(str(e))
        return 2

    formatted = _format_scan(result)
    if args.json:
        print(json.dumps(formatted, indent=2))
        return 0

    print_separator(60)
    for lane, candidates in formatted.items():
        print(f"Lane {lane}: {len(candidates)} candidate(s)")
        for candidate in candidates:
            print(f"  {candidate}")
    print_separator(60)
    return 0


def build_cleanup_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Relocate a finished transcode into the output tree")
    ap.add_argument("--media", required=True, help="Candidate path relative to the input root, e.g. 0/show/ep1.mkv")
    ap.add_argument("--temp", required=True, type=Path, help="Temporary file produced by the transcoder")
    ap.add_argument("--failed", action="store_true", help="Treat the transcode as failed")
    ap.add_argument("--input", type=Path, default=None, help="Input root (used by source strategies)")
    ap.add_argument("--output", type=Path, default=None, help="Output root")
    ap.add_argument("--overwrite", action="store_true", help="Replace existing files in the output tree")
    ap.add_argument("--strategies", default=None,
                    help=f"Comma-separated cleanup strategies ({', '.join(STRATEGIES)})")
    ap.add_argument("--env", type=Path, default=None, help="Path to a .env configuration file")
    ap.add_argument("--debug", action="store_true", help="Show debug output")
    return ap


def main_cleanup(argv: Optional[List[str]] = None) -> int:
    args = build_cleanup_parser().parse_args(argv)
    config = get_config(args.env)
    _configure_logging(config, args.debug)

    if args.input is not None:
        config['base_input_dir'] = args.input
    if args.output is not None:
        config['base_output_dir'] = args.output
    if args.overwrite:
        config['overwrite_files'] = True
    if args.strategies is not None:
        config['cleanup_strategies'] = args.strategies

    media = Path(args.media)
    lane = media.parts[0] if media.parts else ""
    if not LANE_NAME.fullmatch(lane):
        logger.error(f"--media must start with a lane directory: {args.media}")
        return 2

    event = TranscodeFinishedEvent(
        media=MediaCandidate(relative_path=media, priority=int(lane)),
        temporary_path=args.temp.resolve(),
        successful=not args.failed,
    )

    try:
        pipeline = build_cleanup_pipeline(CleanupConfig.from_config(config))
        context = CleanupService(pipeline).on_transcode_finished(event)
    except (ClustercodeError, ValueError) as e:
        logger.error(str(e))
        return 2

    if context.output_path is None:
        logger.result("No output written")
        return 1
    logger.result(str(context.output_path))
    return 0


if __name__ == "__main__":
    sys.exit(main_scan())
