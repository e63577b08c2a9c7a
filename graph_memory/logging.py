"""
Logging configuration module for Graph Memory MCP Server.

Configures structlog with appropriate processors for development.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for the application.

    Uses ConsoleRenderer for readable output. Logs go to stderr because
    stdout carries the MCP stdio stream.

    Args:
        level: Standard logging level name (e.g. "INFO", "DEBUG")
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

