import logging

from casino_crm.core.config import settings


def configure_logging(level: str = None) -> None:
    """Apply LOG_LEVEL / LOG_FORMAT from settings to the root logger."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=settings.LOG_FORMAT,
    )
