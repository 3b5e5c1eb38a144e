"""ORM models for teams, users, pull requests and reviewer assignments."""
# Importing the package registers every table on Base.metadata
from .team import Team
from .user import User
from .pull_request import PullRequest, PullRequestStatus
from .assignment import ReviewerAssignment

__all__ = [
    "Team",
    "User",
    "PullRequest",
    "PullRequestStatus",
    "ReviewerAssignment",
]
