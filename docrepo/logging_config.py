import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure the root logger for the docrepo command line.

    The level comes from ``LOG_LEVEL`` (default INFO) and the format from
    ``LOG_FORMAT``. ``debug`` forces DEBUG so that repository operation
    logs enabled by ``RepositorySettings.log`` are actually emitted.
    """
    log_level = "DEBUG" if debug else os.environ.get("LOG_LEVEL", "INFO")
    log_level = log_level.upper()
    log_format = os.environ.get("LOG_FORMAT", DEFAULT_LOG_FORMAT)

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        logger.warning(f"Invalid log level: {log_level}, defaulting to INFO")
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=log_format, force=True)

    logger.debug(
        "docrepo logging configured",
        extra={"log_level": log_level, "debug": debug},
    )
