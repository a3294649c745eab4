"""Configuration management for clustercode."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, FrozenSet, Tuple

from .utils.logging import get_logger

logger = get_logger("config")

# key -> (environment variable, default)
_SETTINGS = {
    'base_input_dir': ('CC_BASE_INPUT_DIR', '/input'),
    'base_output_dir': ('CC_BASE_OUTPUT_DIR', '/output'),
    'overwrite_files': ('CC_OVERWRITE_FILES', 'false'),
    'allowed_extensions': ('CC_ALLOWED_EXTENSIONS', 'mkv,mp4,avi'),
    'skip_extension_name': ('CC_SKIP_EXTENSION_NAME', '.done'),
    'cleanup_strategies': ('CC_CLEANUP_STRATEGIES', 'structured_output,mark_source'),
    'log_level': ('CC_LOG_LEVEL', 'INFO'),
    'debug': ('CC_DEBUG', 'false'),
}


def load_env_file(env_path: Optional[Path] = None) -> Dict[str, str]:
    """Load environment variables from .env file."""
    if env_path is None:
        # Look for .env in current directory, then in package directory
        candidates = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for candidate in candidates:
            if candidate.exists():
                env_path = candidate
                break

    env_vars = {}

    if env_path and env_path.exists():
        with open(env_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    if '=' in line:
                        key, value = line.split('=', 1)
                        env_vars[key.strip()] = value.strip().strip('"').strip("'")

    return env_vars


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def _parse_list(value: Any) -> Tuple[str, ...]:
    if isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        items = str(value).split(",")
    return tuple(item.strip() for item in items if str(item).strip())


def normalize_extensions(value: Any) -> FrozenSet[str]:
    """Turn 'mkv, .MP4' into {'.mkv', '.mp4'}."""
    return frozenset(
        ext.lower() if ext.startswith('.') else f".{ext.lower()}"
        for ext in _parse_list(value)
    )


def get_config(env_path: Optional[Path] = None) -> Dict[str, Any]:
    """Get configuration from environment variables and .env file.

    Keys in the .env file use the lower-case setting name; environment
    variables use the CC_ prefixed upper-case name. The .env file wins.
    """
    env_vars = load_env_file(env_path)

    raw = {
        key: env_vars.get(key, os.getenv(env_name, default))
        for key, (env_name, default) in _SETTINGS.items()
    }

    config = {
        'base_input_dir': Path(raw['base_input_dir']),
        'base_output_dir': Path(raw['base_output_dir']),
        'overwrite_files': _parse_bool(raw['overwrite_files']),
        'allowed_extensions': normalize_extensions(raw['allowed_extensions']),
        'skip_extension_name': raw['skip_extension_name'],
        'cleanup_strategies': _parse_list(raw['cleanup_strategies']),
        'log_level': raw['log_level'].upper(),
        'debug': _parse_bool(raw['debug']),
    }

    logger.debug(f"Loaded configuration: {config}")
    return config


@dataclass(frozen=True)
class ScanConfig:
    """Settings consumed by the priority scanner."""
    base_input_dir: Path
    allowed_extensions: FrozenSet[str]
    skip_extension_name: str = ".done"

    def __post_init__(self):
        if not self.skip_extension_name:
            raise ValueError("skip_extension_name must not be empty")
        object.__setattr__(self, 'base_input_dir', Path(self.base_input_dir))
        object.__setattr__(self, 'allowed_extensions',
                           normalize_extensions(self.allowed_extensions))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScanConfig":
        return cls(
            base_input_dir=config['base_input_dir'],
            allowed_extensions=config['allowed_extensions'],
            skip_extension_name=config['skip_extension_name'],
        )


@dataclass(frozen=True)
class CleanupConfig:
    """Settings consumed by the cleanup pipeline stages."""
    base_output_dir: Path
    base_input_dir: Path
    overwrite_files: bool = False
    skip_extension_name: str = ".done"
    cleanup_strategies: Tuple[str, ...] = ("structured_output", "mark_source")

    def __post_init__(self):
        object.__setattr__(self, 'base_output_dir', Path(self.base_output_dir))
        object.__setattr__(self, 'base_input_dir', Path(self.base_input_dir))
        object.__setattr__(self, 'cleanup_strategies', _parse_list(self.cleanup_strategies))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CleanupConfig":
        return cls(
            base_output_dir=config['base_output_dir'],
            base_input_dir=config['base_input_dir'],
            overwrite_files=config['overwrite_files'],
            skip_extension_name=config['skip_extension_name'],
            cleanup_strategies=config['cleanup_strategies'],
        )
