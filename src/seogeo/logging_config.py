"""Logging configuration for the SEO/GEO analyzer."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Fetch and LLM client libraries that log every request at INFO
QUIET_LOGGERS = ('urllib3', 'httpx', 'openai', 'anthropic')


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for the analyzer.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Optional file that receives a copy of every record
    """
    # stderr keeps JSON reports on stdout parseable
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
