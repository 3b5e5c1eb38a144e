"""Statistics schemas."""
from pydantic import BaseModel, Field


class AssignmentStats(BaseModel):
    """Schema for assignment statistics."""
    assignments_per_user: dict[str, int] = Field(
        default_factory=dict, description="Current assignment count for every registered user"
    )
    open_prs: int
    merged_prs: int
