"""
Centralized logging utilities for clustercode

Provides consistent logging patterns with configurable debug levels:
- [INFO] for general information
- [WARN] for warnings
- [ERROR] for errors
- [RESULT] for final results
- [DEBUG] for debug information
- [DISCOVERY] for candidate scanning
- [CLEANUP] for cleanup pipeline stages
- [OUTPUT] for files written to the output tree

Usage:
    from clustercode.utils.logging import get_logger, set_debug_mode

    set_debug_mode(True)  # Enable debug messages

    logger = get_logger("priority_scanner")
    logger.info("This is an info message")
    logger.debug("This is a debug message")  # Only shows if debug enabled
    logger.discovery("Found 3 lanes")
"""

import os
from enum import Enum
from typing import Optional

from tqdm import tqdm

# Global logging configuration
_DEBUG_ENABLED = False
_QUIET_MODE = False
_LOG_LEVEL = "INFO"


class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_LEVELS = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARN": LogLevel.WARN,
    "WARNING": LogLevel.WARN,
    "ERROR": LogLevel.ERROR,
}


def _init_from_environment():
    global _DEBUG_ENABLED, _LOG_LEVEL
    if os.getenv('CC_DEBUG', '').lower() in ('1', 'true', 'yes'):
        _DEBUG_ENABLED = True
    level = os.getenv('CC_LOG_LEVEL', '').upper()
    if level in _LEVELS:
        _LOG_LEVEL = level

_init_from_environment()


def set_debug_mode(enabled: bool):
    """Enable or disable debug mode globally"""
    global _DEBUG_ENABLED, _LOG_LEVEL
    _DEBUG_ENABLED = enabled
    if enabled:
        _LOG_LEVEL = "DEBUG"


def set_quiet_mode(enabled: bool):
    """Enable or disable quiet mode (suppress INFO and DEBUG messages)"""
    global _QUIET_MODE
    _QUIET_MODE = enabled


def set_log_level(level: str):
    """Set the global log level: DEBUG, INFO, WARN, ERROR"""
    global _LOG_LEVEL
    level = level.upper()
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    _LOG_LEVEL = level


class Logger:
    """Centralized logger with consistent formatting and configurable output"""

    def __init__(self, module_name: str = ""):
        self.module_name = module_name
        self.prefix = f"[{module_name}] " if module_name else ""

    def _should_log(self, level: LogLevel) -> bool:
        """Check if message should be logged based on current settings"""
        if _QUIET_MODE and level in (LogLevel.DEBUG, LogLevel.INFO):
            return False

        current_level = _LEVELS.get(_LOG_LEVEL, LogLevel.INFO)
        return level.value >= current_level.value

    def _log(self, tag: str, level: LogLevel, message: str):
        if not self._should_log(level):
            return
        print(f"[{tag}] {self.prefix}{message}")

    def debug(self, message: str):
        """Log debug message (only if debug mode enabled)"""
        if _DEBUG_ENABLED:
            self._log("DEBUG", LogLevel.DEBUG, message)

    def info(self, message: str):
        """Log informational message"""
        self._log("INFO", LogLevel.INFO, message)

    def warn(self, message: str):
        """Log warning message"""
        self._log("WARN", LogLevel.WARN, message)

    def error(self, message: str):
        """Log error message"""
        self._log("ERROR", LogLevel.ERROR, message)

    def result(self, message: str):
        """Log result message"""
        self._log("RESULT", LogLevel.INFO, message)

    # Domain-specific logging methods
    def discovery(self, message: str):
        """Log candidate discovery message"""
        self._log("DISCOVERY", LogLevel.INFO, message)

    def cleanup(self, message: str):
        """Log cleanup stage message"""
        self._log("CLEANUP", LogLevel.INFO, message)

    def output(self, message: str):
        """Log output tree message"""
        self._log("OUTPUT", LogLevel.INFO, message)


def get_logger(module_name: str = "") -> Logger:
    """Get a logger instance for a module"""
    return Logger(module_name)


def create_progress_bar(total: Optional[int] = None, desc: str = "", unit: str = "it",
                        position: Optional[int] = None, leave: bool = True,
                        disable: bool = False):
    """Create a progress bar with consistent styling"""
    return tqdm(total=total, desc=desc, unit=unit, position=position, leave=leave,
                disable=disable or _QUIET_MODE)


def print_separator(width: int = 90):
    """Print a separator line"""
    print("-" * width)
