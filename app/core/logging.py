"""Structured logging setup."""
import logging, sys, json, os

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record):
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RESERVED:
                continue
            base[k] = v
        return json.dumps(base, default=str)


def build_formatter(plain_format: str | None = None) -> logging.Formatter:
    """JSON unless LOG_FORMAT selects plain text lines."""
    if os.getenv("LOG_FORMAT", "json").lower() == "json":
        return JsonFormatter()
    return logging.Formatter(plain_format or "%(asctime)s %(levelname)s %(name)s %(message)s")


def configure_logging(level: str = "INFO", plain_format: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(plain_format))
    root.addHandler(handler)
