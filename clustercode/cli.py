"""CLI entry points for clustercode package."""

import sys
from pathlib import Path


def main_scan():
    """Entry point for clustercode-scan command."""
    from clustercode.core.main import main_scan
    sys.exit(main_scan())


def main_cleanup():
    """Entry point for clustercode-cleanup command."""
    from clustercode.core.main import main_cleanup
    sys.exit(main_cleanup())


if __name__ == "__main__":
    # If called directly, determine which command to run based on script name
    script_name = Path(sys.argv[0]).stem
    if "cleanup" in script_name:
        main_cleanup()
    else:
        main_scan()
