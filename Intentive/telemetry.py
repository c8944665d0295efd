"""Logging setup and call tracing for the relay."""

from __future__ import annotations

import functools
import inspect
import logging
import time
from logging.handlers import RotatingFileHandler
from typing import Any, Awaitable, Callable, TypeVar

from .config.parser import Settings

LOGGER_NAME = "intentive"
FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s  [pid:%(process)d]"

T = TypeVar("T")

log = logging.getLogger(LOGGER_NAME)


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a rotating file handler and a console handler to the app logger.

    Calling it again replaces the handlers instead of stacking them. The file
    handler is skipped in serverless mode, where the working directory is
    read-only, and when the log file cannot be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, settings.log_level, logging.INFO))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # auto rotate log file to prevent it from getting too large
    if settings.log_file and not settings.serverless:
        try:
            file_handler = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("log file %s unavailable, console only: %s", settings.log_file, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
    return logger


def _preview(value: Any, limit: int) -> str:
    text = repr(value)
    return text[:limit] + "..." if len(text) > limit else text


def logged_call(name: str, func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Wrap a coroutine function with start/success/failure logging.

    Arguments and results are truncated in the log; exceptions are logged
    and re-raised. The traceback is left to whoever handles the exception.
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{name} is not a coroutine function")

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        start_time = time.time()
        args_preview = [_preview(a, 150) for a in args]
        log.info("Call starting -> %s | Args: %s", name, args_preview)
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            duration = time.time() - start_time
            log.error(
                "Failed <- %s | Time Consume: %.3fs | Error: %s",
                name,
                duration,
                e,
            )
            raise
        duration = time.time() - start_time
        log.info(
            "Success <- %s | Time Consume: %.3fs | Result Type: %s | Result Preview: %s",
            name,
            duration,
            type(result).__name__,
            _preview(result, 300),
        )
        return result

    return wrapper
