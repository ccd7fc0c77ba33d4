"""Loguru configuration for the API server and the CLI.

Records emitted by an upstream client carry the provider name in
``extra["upstream"]`` (``open_states``, ``zippopotam``); everything else is
tagged ``app``. The text format shows the tag so retries and failures can be
attributed to a provider at a glance, and JSON output keeps it as a field
for log shipping.
"""

import sys
from pathlib import Path

from loguru import logger

LOG_FILE_NAME = "civic-snapshot.log"
UPSTREAM_LOG_FILE_NAME = "upstream.log"

_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[upstream]:<11} | {name}:{function}:{line} | {message}"
)


def _is_upstream(record: dict) -> bool:
    return record["extra"].get("upstream", "app") != "app"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None, *, json_logs: bool = False) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for log files. When set, two rotating
            file sinks are added (24 hours, retained 7 days): one for all
            records and one holding only upstream provider records.
        json_logs: Emit one JSON object per line on stderr instead of text.
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(extra={"upstream": "app"})

    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_LOG_FORMAT)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / LOG_FILE_NAME,
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
        logger.add(
            log_path / UPSTREAM_LOG_FILE_NAME,
            level=level,
            format=_LOG_FORMAT,
            filter=_is_upstream,
            rotation="24h",
            retention="7 days",
        )
