"""Application settings and logging configuration"""
import logging
import logging.config

from decouple import config as env

from tmdb_login.core.error.exceptions import ConfigurationException

APP_LOGGER = "tmdb_login"

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        # Core application logging
        APP_LOGGER: {
            "handlers": ["console"],
            "level": env("APP_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        # Third party libraries
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def _level_name(level) -> str:
    name = str(level).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigurationException(
            f"Unknown log level: {level!r}",
            "validation"
        )
    return name


def configure_logging(level: str = None) -> None:
    """Apply LOGGING, optionally overriding the application log level

    Raises:
        ConfigurationException: a logger level (including APP_LOG_LEVEL) is not a known level name
    """
    loggers = {}
    for name, logger in LOGGING["loggers"].items():
        logger_level = level if level and name == APP_LOGGER else logger["level"]
        loggers[name] = {**logger, "level": _level_name(logger_level)}
    logging.config.dictConfig({**LOGGING, "loggers": loggers})
