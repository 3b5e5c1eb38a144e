"""Pull request model."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..storage.database import Base
from ..storage.types import UTCDateTime


class PullRequestStatus(str, Enum):
    """Lifecycle status of a pull request. Transitions only OPEN -> MERGED."""
    OPEN = "OPEN"
    MERGED = "MERGED"


class PullRequest(Base):
    """Pull request awaiting (or done with) review."""

    __tablename__ = "pull_requests"

    pr_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    pr_name: Mapped[str] = mapped_column(String(500), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PullRequestStatus.OPEN.value, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    merged_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    def __repr__(self) -> str:
        return f"<PullRequest(pr_id='{self.pr_id}', status='{self.status}')>"
