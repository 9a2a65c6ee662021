import json
import logging
import logging.config
from datetime import datetime, timezone

from config import Config


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        kind = getattr(record, "error_kind", None)
        if kind is not None:
            log_entry["error_kind"] = kind
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(level=None, log_format=None):
    """Configure root logging from Config, with optional overrides"""
    level = (level or Config.LOG_LEVEL).upper()
    log_format = log_format or Config.LOG_FORMAT
    if log_format not in ("text", "json"):
        log_format = "text"

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": log_format,
                "stream": "ext://sys.stderr"
            }
        },
        "loggers": {
            "werkzeug": {
                "level": level,
                "handlers": ["console"],
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["console"]
        }
    }

    logging.config.dictConfig(config)
    return config
