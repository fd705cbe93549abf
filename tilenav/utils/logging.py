"""Structured logging configuration and per-category diagnostics."""

from __future__ import annotations

import logging
import sys
from typing import Any, Mapping

from tilenav.core.enums import LogCategory

# Finer than DEBUG: per-tick chatter (FSM self-transitions, BFS visits).
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

LOGGER_PREFIX = "tilenav"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with a clean format for navigation output."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)


class Diagnostics:
    """Per-category severity filter in front of the stdlib loggers.

    Every navigation/FSM component receives one of these instead of
    touching process-wide flags.  A message is emitted through
    ``logging.getLogger("tilenav.<category>")`` only when its level is at
    or above the category's threshold; the stdlib handler configuration
    then decides where it ends up.
    """

    __slots__ = ("_levels",)

    def __init__(self, levels: Mapping[LogCategory, int] | None = None, default: int = VERBOSE) -> None:
        self._levels: dict[LogCategory, int] = {cat: default for cat in LogCategory}
        if levels:
            self._levels.update(levels)

    @classmethod
    def from_names(cls, names: Mapping[str, str]) -> Diagnostics:
        """Build from ``{"graph": "WARNING", ...}`` style config values."""
        levels: dict[LogCategory, int] = {}
        for cat_name, level_name in names.items():
            level = logging.getLevelName(level_name.upper())
            if not isinstance(level, int):
                raise ValueError(f"unknown log level {level_name!r} for category {cat_name!r}")
            levels[LogCategory(cat_name.lower())] = level
        return cls(levels)

    # -- filter control --

    def level(self, category: LogCategory) -> int:
        return self._levels[category]

    def set_level(self, category: LogCategory, level: int) -> None:
        self._levels[category] = level

    def disable(self, category: LogCategory) -> None:
        """Silence a category entirely."""
        self._levels[category] = logging.CRITICAL + 1

    def disable_all(self) -> None:
        for cat in LogCategory:
            self.disable(cat)

    def enabled(self, category: LogCategory, level: int) -> bool:
        return level >= self._levels[category]

    @staticmethod
    def logger(category: LogCategory) -> logging.Logger:
        return logging.getLogger(f"{LOGGER_PREFIX}.{category.value}")

    # -- emitting --

    def log(self, category: LogCategory, level: int, msg: str, *args: Any) -> None:
        if self.enabled(category, level):
            self.logger(category).log(level, msg, *args)

    def verbose(self, category: LogCategory, msg: str, *args: Any) -> None:
        self.log(category, VERBOSE, msg, *args)

    def debug(self, category: LogCategory, msg: str, *args: Any) -> None:
        self.log(category, logging.DEBUG, msg, *args)

    def info(self, category: LogCategory, msg: str, *args: Any) -> None:
        self.log(category, logging.INFO, msg, *args)

    def warning(self, category: LogCategory, msg: str, *args: Any) -> None:
        self.log(category, logging.WARNING, msg, *args)

    def error(self, category: LogCategory, msg: str, *args: Any) -> None:
        self.log(category, logging.ERROR, msg, *args)
