"""femtologging helpers shared by the webhook core and its HTTP surface.

Messages are formatted eagerly with percent-style interpolation before they
reach femtologging, which only accepts pre-rendered strings.

Example:
>>> from hubhook.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Registered %d handler(s)", 3)

"""

from __future__ import annotations

import enum
import functools
import typing as typ

from femtologging import basicConfig, get_logger

_DEFAULT_LEVEL = "INFO"


class LogLevel(enum.StrEnum):
    """Log levels understood by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the upper-cased level and whether the input had to be replaced.

    Parameters
    ----------
    level : str | None
        Raw level string, typically read from ``HUBHOOK_LOG_LEVEL``.

    Returns
    -------
    tuple[str, bool]
        ``(level, invalid)`` where ``invalid`` is ``True`` when the input was
        empty or unknown and ``INFO`` was substituted.

    """
    if not level:
        return (_DEFAULT_LEVEL, True)

    candidate = level.strip().upper()
    if candidate in LogLevel.__members__:
        return (candidate, False)
    return (_DEFAULT_LEVEL, True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root handler at the normalized level.

    Parameters
    ----------
    level : str
        Raw level string.
    force : bool, optional
        Replace handlers installed by an earlier call.

    Returns
    -------
    tuple[str, bool]
        Same contract as :func:`normalize_log_level`.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


class _SupportsLog(typ.Protocol):
    """Anything exposing femtologging's ``log`` signature."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def log_at(
    level: LogLevel,
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Render ``template`` with percent-style ``args`` and log it at ``level``.

    Templates without ``args`` are passed through untouched, so literal ``%``
    signs need no escaping.

    Parameters
    ----------
    level : LogLevel
        Severity of the record.
    logger : _SupportsLog
        Destination logger.
    template : str
        Percent-style template.
    *args : object
        Values interpolated into ``template``.
    exc_info : object | None, optional
        Exception to attach to the record.

    """
    message = template % args if args else template
    logger.log(level.value, message, exc_info=exc_info, stack_info=False)


log_debug = functools.partial(log_at, LogLevel.DEBUG)
log_info = functools.partial(log_at, LogLevel.INFO)
log_warning = functools.partial(log_at, LogLevel.WARNING)
log_error = functools.partial(log_at, LogLevel.ERROR)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_at",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
