"""
Logging for the MCP AURA backend.

Every record, whether emitted through structlog or a plain
``logging.getLogger(__name__)`` logger in the builders and services, goes
through one ``ProcessorFormatter``. ``settings.log_format`` picks the
renderer: ``json`` for deployments, ``console`` for local work, ``auto``
switches to console output at DEBUG.
"""

import logging
import sys
from typing import Optional

import structlog

from . import __version__
from .config import settings

SERVICE_NAME = "mcp-aura"

# Client libraries that log every request at INFO.
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "anthropic")


def _tag_service(_logger, _method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _use_console(level: int, log_format: str) -> bool:
    fmt = log_format.lower()
    if fmt == "console":
        return True
    if fmt == "json":
        return False
    return level == logging.DEBUG


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Install the structlog pipeline on the root logger.

    Args:
        log_level: Override ``settings.log_level``
        log_format: Override ``settings.log_format`` (``auto``, ``json`` or ``console``)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    console = _use_console(level, log_format or settings.log_format)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _tag_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if console:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
