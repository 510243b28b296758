"""Logging utilities for id3tree.

This module provides a custom SPLIT log level and a context manager for
enabling/disabling id3tree logging with loguru.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) to
    prevent duplicate output when ``enable_logging()`` adds its own handler.
    If your application configures loguru handlers *before* importing id3tree,
    handler 0 may no longer be the default; in that case the removal is a
    no-op (the ``ValueError`` is suppressed). Configure loguru handlers
    *after* importing id3tree, or re-add a stderr handler explicitly.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

# Register custom SPLIT level (between DEBUG=10 and INFO=20)
SPLIT_LEVEL: Final[str] = "SPLIT"
SPLIT_LEVEL_NUMBER: Final[int] = 15


def _register_split_level() -> None:
    """Register the SPLIT custom log level with loguru.

    If the level already exists with a different numeric value, emits a
    UserWarning because loguru does not permit changing it.
    """
    try:
        existing_level = logger.level(SPLIT_LEVEL)
    except ValueError:
        logger.level(SPLIT_LEVEL, no=SPLIT_LEVEL_NUMBER, icon="🌿")
    else:
        if existing_level.no != SPLIT_LEVEL_NUMBER:
            msg = (
                f"SPLIT level already registered with numeric value {existing_level.no},"
                f" expected {SPLIT_LEVEL_NUMBER}"
            )
            warnings.warn(msg, stacklevel=2)


_register_split_level()

type LogLevel = Literal[
    "TRACE",
    "DEBUG",
    "SPLIT",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

_LOG_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> {extra}"
)


class LoggingHandle:
    """Handle for managing id3tree logging lifecycle.

    Stores the handler ID from logger.add() and provides cleanup via disable()
    or automatically through the context manager protocol.

    Examples:
        >>> with enable_logging(level="SPLIT"):  # doctest: +SKIP
        ...     tree = induce(dataset)
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        """Initialize the logging handle.

        Args:
            handler_id (int): The loguru handler ID from logger.add().
        """
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        """Remove the handler associated with this logging handle.

        When this is the last active handle, ``logger.disable("id3tree")`` is
        called, which also silences handlers added independently via
        ``logger.enable("id3tree")``.
        """
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Enter context manager.

        Returns:
            LoggingHandle: This handle instance.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager and disable logging."""
        self.disable()


def enable_logging(*, level: LogLevel = "INFO") -> LoggingHandle:
    """Enable id3tree logging on stderr.

    Args:
        level (LogLevel): Minimum log level to display. Defaults to "INFO",
            which reports dataset loading and the finished tree's shape. Lower
            to "SPLIT" to see every attribute chosen during induction, or to
            "DEBUG" to also see each leaf as it is created.

    Returns:
        LoggingHandle: Independent handle for managing the logging handler.
    """
    logger.enable(PACKAGE_NAME)

    handler_id = logger.add(
        sys.stderr,
        level=level,
        filter=_is_id3tree_record,
        format=_LOG_FORMAT,
    )

    return LoggingHandle(handler_id)


def _is_id3tree_record(record: Record) -> bool:
    """Pass only records emitted from inside the id3tree package.

    Args:
        record (Record): The loguru Record object to filter.

    Returns:
        bool: True if the record is from the id3tree package.
    """
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
