"""
clustercode - candidate discovery and output relocation for a distributed
transcoding worker.
"""

__version__ = "1.0.0"

from .config import get_config, load_env_file, ScanConfig, CleanupConfig

__all__ = [
    "get_config",
    "load_env_file",
    "ScanConfig",
    "CleanupConfig",
]
