# src/SISFO/app_logger.py
import logging
import logging.config
import os

LOG_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def build_logging_config(level: str = _DEFAULT_LEVEL) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": LOG_FMT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "":               {"handlers": ["console"], "level": level},
            "SISFO":          {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn":        {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error":  {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "aio_pika":       {"handlers": ["console"], "level": "WARNING", "propagate": False},
            "aiormq":         {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


_configured = False


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure JSON console logging once and return the app logger."""
    global _configured
    if not _configured:
        logging.config.dictConfig(build_logging_config((level or _DEFAULT_LEVEL).upper()))
        _configured = True
    return logging.getLogger("SISFO")


def get_logger(name: str | None = None) -> logging.Logger:
    """Child of the SISFO logger; module names (``SISFO.x.y``) are used as-is."""
    if not name:
        return logging.getLogger("SISFO")
    if name == "SISFO" or name.startswith("SISFO."):
        return logging.getLogger(name)
    return logging.getLogger("SISFO").getChild(name)
