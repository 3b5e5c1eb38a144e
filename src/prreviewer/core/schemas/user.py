"""User schemas."""
from pydantic import BaseModel, ConfigDict, Field

from .pull_request import PullRequestShort


class User(BaseModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    user: User


class SetIsActiveRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=255)
    is_active: bool


class UserReviews(BaseModel):
    """Pull requests a user currently holds an assignment on."""
    user_id: str
    pull_requests: list[PullRequestShort]
