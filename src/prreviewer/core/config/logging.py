"""Logging setup driven by the loaded configuration."""
import logging
from typing import Optional

from .settings import PRReviewerConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: PRReviewerConfig, log_file: Optional[str] = None) -> None:
    """Configure root logging from config.

    Args:
        config: Loaded configuration (log_level, log_file)
        log_file: Optional override for the configured log file
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    target = log_file or config.log_file
    if target:
        handlers.append(logging.FileHandler(target))

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
