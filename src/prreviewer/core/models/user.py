"""User model."""
from sqlalchemy import Boolean, ForeignKey, Index, String, true
from sqlalchemy.orm import Mapped, mapped_column

from ..storage.database import Base


class User(Base):
    """Team member who can author pull requests and review them."""

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_team_active", "team_name", "is_active"),
    )

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    team_name: Mapped[str] = mapped_column(
        String(255), ForeignKey("teams.name", ondelete="CASCADE"), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<User(user_id='{self.user_id}', team_name='{self.team_name}', "
            f"is_active={self.is_active})>"
        )
