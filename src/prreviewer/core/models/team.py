"""Team model."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ..storage.database import Base


class Team(Base):
    """Named grouping of users; the scope of reviewer eligibility."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)

    def __repr__(self) -> str:
        return f"<Team(name='{self.name}')>"
