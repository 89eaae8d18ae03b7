# =============================================================================
# Client Configuration Package
# =============================================================================
# Holds environment-driven settings and the logging setup applied at startup.
#
# Call configure_logging() once from the embedding application before the
# first upload; library code only ever calls logging.getLogger(__name__).
# =============================================================================

import logging.config


def configure_logging() -> None:
    """Apply ``settings.LOGGING`` and make sure the log directory exists."""
    from config import settings

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(settings.LOGGING)


__all__ = ("configure_logging",)
