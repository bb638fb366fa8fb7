import json
import logging
import os
from typing import Optional


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """
    Console logging on the root logger. `fmt` is "text" or "json"; when not
    given, CRYPTOPULSE_LOG_FORMAT decides.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    # Clear existing handlers so repeated setup does not duplicate lines
    root.handlers = []

    fmt = (fmt or os.environ.get("CRYPTOPULSE_LOG_FORMAT", "text")).lower()
    if fmt == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # urllib3 retries/connection chatter is noise at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
