import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Set these in the environment to change logging without touching code
USE_JSON_LOGS = os.getenv("SALARY_SURVEY_JSON_LOGS", "false").lower() == "true"
LOG_LEVEL = os.getenv("SALARY_SURVEY_LOG_LEVEL", "INFO").upper()


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def get_logger(name: str, use_json: Optional[bool] = None) -> logging.Logger:
    """Return a logger under the ``salary_survey`` namespace.

    Handlers are attached once, to the package root logger, so module loggers
    created with this function share them.
    """
    if use_json is None:
        use_json = USE_JSON_LOGS

    root = logging.getLogger("salary_survey")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    if name == "salary_survey" or name.startswith("salary_survey."):
        return logging.getLogger(name)
    return root.getChild(name)


def set_level(level: str) -> None:
    """Change the level of every ``salary_survey`` logger at once."""
    get_logger("salary_survey").setLevel(getattr(logging, level.upper(), logging.INFO))
