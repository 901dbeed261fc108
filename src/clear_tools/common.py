from __future__ import annotations

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Callable, Literal, TypeVar

import coloredlogs

T = TypeVar("T")

LogLevel = Literal["ERROR", "WARNING", "INFO", "DEBUG"]

# 1 MB as used for size limits, i.e. 1024 * 1024 bytes
MIB = 1024 * 1024


def main_func(func: Callable[[T], int]) -> Callable[[T], None]:
    # Ensure that tap finds the correct annotations
    @wraps(func)
    def _wrapper(arg: T) -> None:
        sys.exit(func(arg))

    return _wrapper


def setup_logging(name: str, *, log_level: LogLevel) -> logging.Logger:
    coloredlogs.install(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        level=log_level,
        milliseconds=True,
    )

    return logging.getLogger(name)


def to_mb(size: int) -> int:
    return size // MIB


def shell_quote(value: str | Path) -> str:
    """Double-quotes a value for bash, escaping characters that are special inside
    double quotes, so that the result is always a single, literal word."""
    value = str(value)
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, f"\\{char}")

    return f'"{value}"'


def pretty_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"

    value = size / 1024
    for unit in ("KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.1f} {unit}"

        value /= 1024

    return f"{value:.1f} TB"
