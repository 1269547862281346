"""
Utilities module.

Provides common utilities for logging and LLM input sizing.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from config import Settings, config


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        settings: Settings to use instead of the global config
    """
    settings = settings or config
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Agents, the executor and the graph log through stdlib logging
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger."""
    return structlog.get_logger(name)


# LLM input utilities

def truncate_data(text: str, max_chars: int) -> tuple[str, bool]:
    """
    Truncate data handed to an LLM prompt.
    
    Returns:
        Tuple of (possibly truncated text, whether truncation happened)
    """
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + "\n...[data truncated]...", True


def preview(text: str, limit: int = 200) -> str:
    """Short single-line preview of text for log messages."""
    flat = text.replace("\n", "\\n")
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "..."


# Filenames

def split_filename(filename: str) -> tuple[str, str]:
    """
    Split a filename into its title and file type.

    The file type is the lower-cased extension, or "unknown" when there is none.
    Saved records are titled this way and looked up by the same title.
    """
    title, extension = os.path.splitext(filename)
    return title, extension.lstrip(".").lower() or "unknown"


def strip_extension(filename: str) -> str:
    return split_filename(filename)[0]


def file_type(filename: str) -> str:
    return split_filename(filename)[1]
