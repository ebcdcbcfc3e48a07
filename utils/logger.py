from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

LOG_FILE_NAME = "gmail_assistant.log"
NOISY_LOGGERS = ("googleapiclient.discovery_cache", "google_auth_oauthlib.flow", "urllib3")


def configure_logging(log_dir: Path, level: str = "INFO", console: bool = True) -> Path:
    """Configure the rotating file log and, optionally, a stderr console log.

    Console output goes to stderr so JSON printed by the CLI stays parseable.
    """

    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    handlers: Dict[str, Dict[str, Any]] = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": str(log_path),
            "maxBytes": 1_000_000,
            "backupCount": 3,
            "encoding": "utf-8",
        },
    }
    if console:
        handlers["stderr"] = {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "console": {
                "format": "%(levelname)s | %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {name: {"level": "WARNING"} for name in NOISY_LOGGERS},
        "root": {
            "handlers": list(handlers),
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured at %s", level)
    return log_path
