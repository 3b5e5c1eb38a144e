"""Pull request schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.pull_request import PullRequestStatus


class PullRequest(BaseModel):
    """Pull request with its current reviewer list."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
    assigned_reviewers: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    merged_at: Optional[datetime] = Field(None, alias="mergedAt")

    model_config = ConfigDict(populate_by_name=True)


class PullRequestShort(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus


class PullRequestResponse(BaseModel):
    pr: PullRequest


class CreatePullRequestRequest(BaseModel):
    """Schema for creating a pull request."""
    pull_request_id: str = Field(..., min_length=1, max_length=255)
    pull_request_name: str = Field(..., min_length=1, max_length=500)
    author_id: str = Field(..., min_length=1, max_length=255)


class MergePullRequestRequest(BaseModel):
    pull_request_id: str = Field(..., min_length=1, max_length=255)


class ReassignRequest(BaseModel):
    """Schema for replacing one reviewer of a pull request."""
    pull_request_id: str = Field(..., min_length=1, max_length=255)
    old_user_id: str = Field(..., min_length=1, max_length=255, description="Reviewer to replace")


class ReassignResponse(BaseModel):
    pr: PullRequest
    replaced_by: str = Field(..., description="user_id of the new reviewer")
