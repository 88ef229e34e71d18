"""Rich logging setup for notebooks and scripts using station_selector.

Modules in the package only call ``logging.getLogger(__name__)``; nothing is
printed until the caller runs :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging"]

_HANDLER_FLAG = "_station_selector_handler"


def _numeric_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid logging level: {level!r}")
    return numeric


@lru_cache(maxsize=1)
def _console() -> Console:
    return Console()


def configure_logging(
    level: int | str = logging.INFO,
    *,
    rich_tracebacks: bool = True,
    show_path: bool = False,
) -> None:
    """Send log records from the root logger to a Rich console.

    Calling it again only changes the level; a second handler is never added.

    Args:
        level: Level name (any case, e.g. ``"debug"``) or number.
        rich_tracebacks: Render exceptions with Rich.
        show_path: Show the emitting file and line next to each record.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    numeric_level = _numeric_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    existing = [h for h in root_logger.handlers if getattr(h, _HANDLER_FLAG, False)]
    if existing:
        existing[0].setLevel(numeric_level)
        return

    # Plain stream handlers would print every record a second time
    for handler in [h for h in root_logger.handlers if not isinstance(h, RichHandler)]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=_console(),
        rich_tracebacks=rich_tracebacks,
        markup=True,
        show_path=show_path,
    )
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _HANDLER_FLAG, True)
    root_logger.addHandler(handler)
