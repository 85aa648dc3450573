"""Logging configuration for slbuilder.

slbuilder logs through loguru and stays silent until the host application
opts in. ``setup_logging`` takes over loguru's handlers: the default
stderr handler is removed so only the sinks described by ``LogConfig``
receive records.

Example:
    from slbuilder.observability.logging import LogConfig, setup_logging, teardown_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG"))
    ...
    teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger

logger.disable("slbuilder")

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]

FILE_ROTATION = "50 MB"
FILE_RETENTION = 3


def _tag(record: Any) -> str:
    # softlayer/client, http, wait#1234
    extra = record["extra"]
    tag = "/".join(str(extra[k]) for k in ("provider", "component") if k in extra)
    tag = tag or record["name"]
    if "instance_id" in extra:
        tag += f"#{extra['instance_id']}"
    return tag


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
    "<cyan>[{extra[_tag]}]</cyan> <level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} [{extra[_tag]}] {message}"


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Where slbuilder records go.

    ``level`` applies to stderr only. A ``file`` always receives DEBUG,
    which includes every request target (API key masked) and raw body.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True


def setup_logging(config: LogConfig) -> list[int]:
    """Replace loguru's handlers with slbuilder sinks and return their IDs."""
    logger.remove()
    logger.configure(patcher=lambda r: r["extra"].update(_tag=_tag(r)))
    logger.enable("slbuilder")
    handler_ids: list[int] = []

    if config.console:
        handler_ids.append(
            logger.add(
                sys.stderr,
                level=config.level,
                format=CONSOLE_FORMAT,
                colorize=True,
                filter="slbuilder",
            )
        )

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                config.file,
                level="DEBUG",
                format=FILE_FORMAT,
                filter="slbuilder",
                rotation=FILE_ROTATION,
                retention=FILE_RETENTION,
                diagnose=False,
            )
        )

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("slbuilder")
