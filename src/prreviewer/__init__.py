"""prreviewer - reviewer assignment for pull requests.

Assigns up to two reviewers from the author's team when a pull request is
opened, replaces reviewers on request and rebalances open pull requests
when a whole team is deactivated.
"""
__version__ = "0.1.0"

from .core.assignment import AssignmentEngine, CandidateSelector, RetryCoordinator
from .core.config.settings import PRReviewerConfig, get_config, init_config
from .core.errors import (
    ErrorKind,
    NoCandidateError,
    OperationCanceledError,
    PRReviewerError,
    PullRequestExistsError,
    PullRequestMergedError,
    PullRequestNotFoundError,
    ReviewerNotAssignedError,
    TeamExistsError,
    TeamNotFoundError,
    TransientStoreError,
    UserNotFoundError,
)
from .core.models import PullRequest, PullRequestStatus, ReviewerAssignment, Team, User
from .core.queries import ReviewQueries
from .core.service import ReviewerService
from .core.storage import Database, get_db, init_db

# Also export core structure
from . import core

__all__ = [
    # Version
    "__version__",
    # Config
    "PRReviewerConfig",
    "init_config",
    "get_config",
    # Database
    "Database",
    "init_db",
    "get_db",
    # Models
    "Team",
    "User",
    "PullRequest",
    "PullRequestStatus",
    "ReviewerAssignment",
    # Engine
    "AssignmentEngine",
    "CandidateSelector",
    "RetryCoordinator",
    "ReviewQueries",
    "ReviewerService",
    # Errors
    "ErrorKind",
    "PRReviewerError",
    "TeamNotFoundError",
    "UserNotFoundError",
    "PullRequestNotFoundError",
    "TeamExistsError",
    "PullRequestExistsError",
    "PullRequestMergedError",
    "ReviewerNotAssignedError",
    "NoCandidateError",
    "TransientStoreError",
    "OperationCanceledError",
    # Core module
    "core",
]
