"""
Logging setup for the CLI and the admin service.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# HTTP plumbing that floods the console at INFO.
NOISY_LOGGERS = ("urllib3", "asyncio", "multipart")


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """
    Configure the root logger.

    Pass the CLI's ``console`` so log lines are drawn above the reorder
    spinner instead of tearing through it.

    Args:
        level: Logging level for the console
        log_file: Optional file that receives everything at DEBUG
        console: Rich console shared with progress output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)

    # Request-level tracing from requests/urllib3 only under --debug
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
