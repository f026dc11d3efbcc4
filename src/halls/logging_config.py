import logging
import os
import sys
from typing import Optional


def configure_logging(default_level: int = logging.INFO, debug: bool = False) -> None:
    """Configure the root logger for the CLI and headless sessions.

    Respects HALLS_LOG_LEVEL env var if present; ``debug`` wins over both.
    """
    level = default_level
    level_name: Optional[str] = os.getenv("HALLS_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
    if debug:
        level = logging.DEBUG

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
