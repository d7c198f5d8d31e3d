import logging.config

from journey_ai.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": (level or settings.log_level).upper()},
            "loggers": {
                # httpx logs full request URLs at INFO, which would include SerpApi keys.
                "httpx": {"level": "WARNING"},
            },
        }
    )
