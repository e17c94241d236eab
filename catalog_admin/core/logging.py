import logging
from logging.config import dictConfig


def configure_logging(log_level: str = "INFO") -> None:
    """Send every log record to one stderr stream.

    Stores log under ``catalog_admin.<store>`` (categories, storage, leads and so
    on) with event names such as ``category_created``. SQLAlchemy engine output
    is held at WARNING, and uvicorn keeps its own loggers so access lines are not
    duplicated through the root handler.
    """
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "default": {
                    "level": log_level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler",
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": log_level,
                },
                "catalog_admin": {"level": log_level},
                "sqlalchemy.engine": {
                    "handlers": ["default"],
                    "level": "WARNING",
                    "propagate": False,
                },
                "uvicorn": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": False,
                },
                "uvicorn.access": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )

    logging.getLogger("catalog_admin").info("logging_configured", extra={"level": log_level})
