"""Pydantic schemas for API validation and serialization."""
from .errors import ErrorDetail, ErrorResponse
from .pull_request import (
    CreatePullRequestRequest,
    MergePullRequestRequest,
    PullRequest,
    PullRequestResponse,
    PullRequestShort,
    ReassignRequest,
    ReassignResponse,
)
from .stats import AssignmentStats
from .team import Team, TeamDeactivateRequest, TeamDeactivation, TeamMember, TeamResponse
from .user import SetIsActiveRequest, User, UserResponse, UserReviews

__all__ = [
    # Team schemas
    "Team",
    "TeamMember",
    "TeamResponse",
    "TeamDeactivateRequest",
    "TeamDeactivation",
    # User schemas
    "User",
    "UserResponse",
    "SetIsActiveRequest",
    "UserReviews",
    # Pull request schemas
    "PullRequest",
    "PullRequestShort",
    "PullRequestResponse",
    "CreatePullRequestRequest",
    "MergePullRequestRequest",
    "ReassignRequest",
    "ReassignResponse",
    # Statistics / errors
    "AssignmentStats",
    "ErrorDetail",
    "ErrorResponse",
]
