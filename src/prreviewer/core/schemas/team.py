"""Team schemas."""
from pydantic import BaseModel, ConfigDict, Field


class TeamMember(BaseModel):
    """Member entry of a team roster."""
    user_id: str = Field(..., description="User identifier")
    username: str = Field(..., description="Display name")
    is_active: bool = Field(default=True, description="Whether the user can be assigned reviews")

    model_config = ConfigDict(from_attributes=True)


class Team(BaseModel):
    """Team with its members, ordered by user_id."""
    team_name: str = Field(..., min_length=1, max_length=255, description="Unique team name")
    members: list[TeamMember] = Field(default_factory=list)


class TeamResponse(BaseModel):
    team: Team


class TeamDeactivateRequest(BaseModel):
    team_name: str = Field(..., min_length=1, max_length=255)


class TeamDeactivation(BaseModel):
    """Outcome of deactivating a whole team."""
    team_name: str
    status: str = "deactivated"
    deactivated_users: int = Field(..., description="Members flipped to inactive")
    reassigned_prs: list[str] = Field(
        default_factory=list, description="Open PRs that received an in-team replacement"
    )
    under_reviewed_prs: list[str] = Field(
        default_factory=list, description="Open PRs that lost a reviewer without replacement"
    )
