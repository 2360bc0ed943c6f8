"""
Logging setup for canvasflow.

Library modules only ask for a logger; the CLI decides where records go.
"""

import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

LEVEL_ENV_VAR = "CANVASFLOW_LOG_LEVEL"


@dataclass(frozen=True)
class LogConfig:
    level: str = "WARNING"
    to_stderr: bool = True


class PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{timestamp} {record.levelname} {record.name}: {message}"


def _level_from_str(level: str) -> int:
    value = getattr(logging, level.upper(), None)
    if isinstance(value, int):
        return value
    return logging.WARNING


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    Configure the ``canvasflow`` logger once. Subsequent calls are no-ops.

    The level comes from ``config.level`` when a config is given, otherwise
    from the ``CANVASFLOW_LOG_LEVEL`` environment variable (default WARNING).
    """
    if getattr(setup_logging, "_configured", False):
        return

    config = config or LogConfig(level=os.getenv(LEVEL_ENV_VAR) or "WARNING")

    stream = sys.stderr if config.to_stderr else sys.stdout
    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(PlainFormatter())

    logger = logging.getLogger("canvasflow")
    logger.setLevel(_level_from_str(config.level))
    # Avoid duplicate handlers if running under certain test runners
    logger.handlers = [handler]
    logger.propagate = False

    setattr(setup_logging, "_configured", True)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
