"""Reviewer assignment model."""
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from ..storage.database import Base


class ReviewerAssignment(Base):
    """One reviewer currently assigned to one pull request."""

    __tablename__ = "assigned_reviewers"

    pr_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.pr_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ReviewerAssignment(pr_id='{self.pr_id}', user_id='{self.user_id}')>"
