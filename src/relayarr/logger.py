"""Logging module for relayarr.

Wraps a single stdlib logger named ``relayarr`` and exposes module-level
helpers so callers can simply ``from . import logger`` and log.
"""

import logging
import re
import sys
from collections.abc import Iterable
from typing import Any
from urllib.parse import urlsplit, urlunsplit

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOGGER_NAME = "relayarr"

_REDACTED = "***"

_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[37m",
    SUCCESS: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
_RESET = "\033[0m"


class ColorFormatter(logging.Formatter):
    """Formatter adding ANSI colors per level when writing to a TTY."""

    def __init__(self, use_color: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = _COLORS.get(record.levelno, "")
        return f"{color}{message}{_RESET}" if color else message


# Global logger instance
_logger_instance: logging.Logger | None = None


def init_logger(level: str | int = logging.INFO) -> logging.Logger:
    """Initialize the global relayarr logger.

    Safe to call more than once; later calls only update the level.

    Args:
        level: Log level name (e.g. "debug") or numeric level.

    Returns:
        The configured logger.
    """
    global _logger_instance
    log = logging.getLogger(LOGGER_NAME)
    if _logger_instance is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorFormatter(use_color=sys.stderr.isatty()))
        log.addHandler(handler)
        log.propagate = False
        _logger_instance = log
    set_log_level(level)
    return log


def set_log_level(level: str | int) -> None:
    """Change the level of the global logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    get_logger().setLevel(level)


def get_logger() -> logging.Logger:
    """Get the global logger, falling back to the named stdlib logger."""
    if _logger_instance is None:
        return logging.getLogger(LOGGER_NAME)
    return _logger_instance


def debug(msg: str, *args: Any) -> None:
    get_logger().debug(msg, *args)


def info(msg: str, *args: Any) -> None:
    get_logger().info(msg, *args)


def success(msg: str, *args: Any) -> None:
    get_logger().log(SUCCESS, msg, *args)


def warning(msg: str, *args: Any) -> None:
    get_logger().warning(msg, *args)


def error(msg: str, *args: Any) -> None:
    get_logger().error(msg, *args)


def critical(msg: str, *args: Any) -> None:
    get_logger().critical(msg, *args)


def exception(msg: str, *args: Any) -> None:
    get_logger().exception(msg, *args)


def section(msg: str, *args: Any) -> None:
    """Log a section banner such as ``===== Loading Definitions =====``."""
    get_logger().info(msg, *args)


def header(msg: str, *args: Any) -> None:
    get_logger().info("--- " + msg, *args)


def redact_url_password(url: str) -> str:
    """Replace the password part of a URL's userinfo with asterisks.

    Args:
        url: URL that may contain ``user:password@`` credentials.

    Returns:
        The URL with the password masked, or unchanged if it has none.
    """
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", f":{_REDACTED}@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def redact(text: str, secrets: Iterable[str]) -> str:
    """Mask every occurrence of the given secret values in text.

    Longer secrets are replaced first so that a secret containing another
    one is fully masked.

    Args:
        text: Text to sanitize, usually a rendered URL or response body.
        secrets: Secret values (API keys, RSS keys, passwords).

    Returns:
        Sanitized text.
    """
    values = sorted({s for s in secrets if s}, key=len, reverse=True)
    if not values:
        return text
    pattern = re.compile("|".join(re.escape(v) for v in values))
    return pattern.sub(_REDACTED, text)
