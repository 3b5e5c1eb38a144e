"""Configuration for prreviewer."""
from .logging import configure_logging
from .settings import PRReviewerConfig, get_config, init_config

__all__ = [
    "PRReviewerConfig",
    "configure_logging",
    "get_config",
    "init_config",
]
