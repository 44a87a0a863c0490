"""
Console logger for the dashboard runtime.

One line per record, key/value details hung below it as a small tree:

    [14:23:45] ANIMATION ✓ Count-up scheduled
               ├─ element: statArea
               └─ target: 380.0

Modules bind a category once at import time:

    log = get_logger().for_category(LogCategory.REFRESH)
    log.info("Live refresh started", elements="avgTemp, avgNDVI")
"""

import sys
from datetime import datetime
from typing import Dict, List, Optional, TextIO, Tuple

from models.enums import LogLevel, LogCategory

_RESET = "\033[0m"
_DIM = "\033[2m"

# category -> ANSI colour of the category column
_CATEGORY_ANSI: Dict[LogCategory, str] = {
    LogCategory.CONFIG: "\033[36m",
    LogCategory.ANIMATION: "\033[93m",
    LogCategory.REFRESH: "\033[33m",
    LogCategory.VISIBILITY: "\033[96m",
    LogCategory.CHART: "\033[92m",
    LogCategory.MAP: "\033[32m",
    LogCategory.DASHBOARD: "\033[94m",
    LogCategory.EVENT: "\033[95m",
    LogCategory.API: "\033[34m",
    LogCategory.SOCKETIO: "\033[35m",
    LogCategory.SYSTEM: "\033[97m",
    LogCategory.SHUTDOWN: "\033[97m",
}

# level -> (rank, symbol, ANSI colour)
_LEVELS: Dict[LogLevel, Tuple[int, str, str]] = {
    LogLevel.DEBUG: (0, "·", _DIM),
    LogLevel.INFO: (1, "✓", "\033[32m"),
    LogLevel.WARN: (2, "⚠", "\033[33m"),
    LogLevel.ERROR: (3, "✗", "\033[31m"),
}

_CATEGORY_WIDTH = 9
_DETAIL_INDENT = " " * 11


class Logger:
    """
    Structured console logger.

    Args:
        min_level: Records below this level are dropped
        use_colors: Emit ANSI colour codes (turn off when piping to a file)
        stream: Output stream; defaults to whatever sys.stdout is at write time
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream

    def enabled_for(self, level: LogLevel) -> bool:
        return _LEVELS[level][0] >= _LEVELS[self.min_level][0]

    def _paint(self, text: str, ansi: str) -> str:
        return f"{ansi}{text}{_RESET}" if self.use_colors else text

    def render(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel,
        details: List[str],
    ) -> List[str]:
        """Lines of one record, without trailing newlines."""
        _rank, symbol, level_ansi = _LEVELS[level]
        head = " ".join((
            datetime.now().strftime("[%H:%M:%S]"),
            self._paint(category.name.ljust(_CATEGORY_WIDTH), _CATEGORY_ANSI.get(category, "\033[37m")),
            self._paint(symbol, level_ansi),
            self._paint(message, level_ansi),
        ))

        lines = [head]
        last = len(details) - 1
        for i, detail in enumerate(details):
            branch = "└─" if i == last else "├─"
            lines.append(f"{_DETAIL_INDENT}{self._paint(branch, _DIM)} {detail}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **fields
    ):
        """
        Write one record. Keyword arguments become "key: value" detail lines
        after any explicit ``details``.
        """
        if not self.enabled_for(level):
            return

        all_details = list(details or [])
        all_details.extend(f"{key}: {value}" for key, value in fields.items())

        out = self.stream or sys.stdout
        for line in self.render(category, message, level, all_details):
            print(line, file=out)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a default category; ``category=`` overrides it per call."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    @property
    def category(self) -> LogCategory:
        return self._category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Reconfigure the shared logger in place, so bound loggers created at
    import time pick up the new level.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
