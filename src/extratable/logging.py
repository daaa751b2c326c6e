"""Logging configuration using loguru with block context support."""

import sys
from contextvars import ContextVar

from loguru import logger

# Block currently being edited, as "<file>:<index>"
block_ctx: ContextVar[str | None] = ContextVar("block", default=None)


def format_record(_record: dict) -> str:
    """Format log record with block context."""
    block = block_ctx.get()
    context_str = f"[{block}] " if block else ""

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        f"{context_str}"
        "<level>{message}</level>\n"
        "{exception}"
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure loguru for the CLI.

    Logs go to stderr so that command output on stdout stays clean.

    Args:
        json_logs: If True, output logs as JSON
        log_level: Minimum log level to output
    """
    logger.remove()

    if json_logs:
        logger.add(
            sys.stderr,
            format="{message}",
            level=log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=format_record,
            level=log_level,
            colorize=True,
        )


def set_block_context(block: str | None) -> None:
    """Set the block being edited."""
    block_ctx.set(block)


def clear_block_context() -> None:
    block_ctx.set(None)


__all__ = [
    "block_ctx",
    "clear_block_context",
    "logger",
    "set_block_context",
    "setup_logging",
]
