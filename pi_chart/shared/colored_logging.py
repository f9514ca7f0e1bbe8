#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Colored console logging for the chart runner.

Level names are wrapped in ANSI colors (DEBUG cyan, INFO green, WARNING
yellow, ERROR red, CRITICAL bold red) when stderr is a terminal; plain text
otherwise, so redirected logs stay greppable.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(module)s.%(funcName)s:%(lineno)d] - %(message)s'
DEFAULT_DATEFMT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name only."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = DEFAULT_FORMAT, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_colors else None
        if color is None:
            return super().format(record)
        # The record is shared between handlers; restore it after formatting
        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def setup_colored_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT, datefmt: Optional[str] = DEFAULT_DATEFMT) -> None:
    """
    Configure the root logger with a single colored stderr handler.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        fmt: Format string for log messages
        datefmt: Format string for timestamps
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt=datefmt))

    root.setLevel(level)
    root.addHandler(console_handler)
    # urllib3 logs every pooled connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    logging.getLogger("matplotlib").setLevel(max(level, logging.WARNING))
