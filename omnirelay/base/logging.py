"""Structured logging for the relay layer.

Every logger handed out by :func:`get_logger` is a child of the shared
``omnirelay`` logger. Only the base logger owns handlers: one stderr handler
with :class:`JsonFormatter`, plus an optional rotating file handler managed
by :func:`configure_logger`. The level comes from ``OMNIRELAY_LOG_LEVEL``
(default ``INFO``).

Events are emitted with :func:`log_event` as one JSON object per line:
``{"event": ..., <LogContext fields>, <event fields>}``.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Iterable, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "omnirelay"
LOG_LEVEL_ENV = "OMNIRELAY_LOG_LEVEL"

FILE_MAX_BYTES = 10 * 1024 * 1024
FILE_BACKUPS = 5

_READY_ATTR = "_omnirelay_ready"
_CONSOLE_ATTR = "_omnirelay_console"
_FILE_ATTR = "_omnirelay_file"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Return the numeric level for ``value`` (name or number), else ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _tagged(handlers: Iterable[logging.Handler], attr: str) -> list[logging.Handler]:
    return [h for h in handlers if getattr(h, attr, False)]


def _new_console_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_ATTR, True)
    return handler


def _refresh_console(logger: logging.Logger, json_mode: bool, level: int) -> None:
    """Re-level console handlers; replace those whose stream has been closed."""
    for handler in _tagged(logger.handlers, _CONSOLE_ATTR):
        stream = getattr(handler, "stream", None)
        if stream is None or getattr(stream, "closed", False):
            # pytest's capture closes the stream it handed out
            logger.removeHandler(handler)
            logger.addHandler(_new_console_handler(json_mode, level))
        else:
            handler.setLevel(level)


def _base_logger(json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the shared ``omnirelay`` logger, configuring it on first use."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not getattr(logger, _READY_ATTR, False):
        wanted = _parse_level(env_level, default=level)
        logger.setLevel(wanted)
        logger.handlers[:] = [_new_console_handler(json_mode, wanted)]
        logger.propagate = False
        setattr(logger, _READY_ATTR, True)
        return logger
    # Later calls keep levels set by configure_logger unless the env var is set.
    wanted = _parse_level(env_level, default=logger.level)
    if logger.level != wanted:
        logger.setLevel(wanted)
    _refresh_console(logger, json_mode, wanted)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``name`` as a child of the shared logger (prefixed when needed)."""
    base = _base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    prefix = BASE_LOGGER_NAME + "."
    logger = logging.getLogger(name if name.startswith(prefix) else prefix + name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def _attach_file_handler(logger: logging.Logger, file_path: str, json_mode: bool) -> None:
    path = os.path.abspath(os.path.expanduser(file_path))
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    keep: Optional[logging.Handler] = None
    for handler in _tagged(logger.handlers, _FILE_ATTR):
        if keep is None and getattr(handler, "baseFilename", None) == path:
            keep = handler
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(OSError):
            handler.close()
    if keep is None:
        keep = RotatingFileHandler(path, maxBytes=FILE_MAX_BYTES, backupCount=FILE_BACKUPS, encoding="utf-8")
        setattr(keep, _FILE_ATTR, True)
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(logger.level)


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level, numeric or by name. ``None`` leaves the level unchanged.
    file_path: Optional[str]
        Path of a rotating log file to write to. A managed file handler on
        another path is replaced; ``None`` removes managed file handlers.
        Handlers attached by callers are never touched.
    json_mode: bool
        Formatter of the file handler: JSON (default) or plain text.

    Returns
    -------
    logging.Logger
        The shared ``omnirelay`` logger.
    """
    logger = _base_logger(json_mode=json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))
        for handler in logger.handlers:
            handler.setLevel(logger.level)
    if file_path is not None:
        _attach_file_handler(logger, file_path, json_mode)
        return logger
    for handler in _tagged(logger.handlers, _FILE_ATTR):
        logger.removeHandler(handler)
        handler.close()
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one structured event line.

    Context keys come first and explicit ``fields`` override them; ``None``
    values are dropped.
    """
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    if ctx:
        payload.update(ctx.to_dict())
    payload.update((k, v) for k, v in fields.items() if v is not None)
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
]
