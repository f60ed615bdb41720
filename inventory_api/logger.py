import json
import logging
import os
import threading
from pathlib import Path

# Output key -> LogRecord attribute
LOG_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "module": "module",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}


class SingletonLogger:
    """
    Builds the process-wide `inventory_api` logger once.

    Handlers:
    - LOG_DIR/inventory_api.log at INFO
    - LOG_DIR/errors.log at ERROR
    - console at LOG_LEVEL (default DEBUG)
    """
    _instance = None
    _lock = threading.Lock()
    _logger = None

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def get_logger(self) -> logging.Logger:
        if self._logger is None:
            with self._lock:
                if self._logger is None:
                    type(self)._logger = self._create_logger()
        return self._logger

    @staticmethod
    def _create_logger() -> logging.Logger:
        logger = logging.getLogger("inventory_api")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers.clear()

        formatter = JsonFormatter(LOG_FIELDS)

        logs_dir = Path(os.environ.get("LOG_DIR", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)

        for filename, level in (("inventory_api.log", logging.INFO), ("errors.log", logging.ERROR)):
            handler = logging.FileHandler(logs_dir / filename, mode='a', encoding='utf-8')
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        console_level = getattr(logging, os.environ.get("LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        return logger


class JsonFormatter(logging.Formatter):
    """One JSON object per line, keyed by `fields`, plus exc_info/stack_info when present."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def __init__(self, fields: dict = None):
        super().__init__()
        self.fields = fields or {"message": "message"}

    def usesTime(self) -> bool:
        return "asctime" in self.fields.values()

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record)

        entry = {key: getattr(record, attr, None) for key, attr in self.fields.items()}

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def get_logger(name: str = "inventory_api") -> logging.Logger:
    """
    Return the shared `inventory_api` logger.

    `name` is accepted so call sites can label themselves; every module logs
    through the same logger and handlers.
    """
    return SingletonLogger().get_logger()
