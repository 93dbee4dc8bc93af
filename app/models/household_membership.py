"""Household membership model linking users to households with roles."""

from datetime import datetime

from sqlalchemy import Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import HouseholdRole

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.household import Household


class HouseholdMembership(Base, TimestampMixin):
    """
    Join table linking users to households with roles.

    Constraints:
    - Unique(household_id, user_id) - one membership per user per household
    - The household creator starts as ADMIN (enforced at application layer)
    """

    __tablename__ = "household_memberships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    household_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("households.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[HouseholdRole] = mapped_column(
        Enum(HouseholdRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=HouseholdRole.MEMBER,
    )

    # Relationships
    household: Mapped["Household"] = relationship("Household", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("household_id", "user_id", name="uq_household_user"),
    )

    @property
    def joined_at(self) -> datetime:
        return self.created_at

    def __repr__(self) -> str:
        return (
            f"<HouseholdMembership(household_id={self.household_id}, "
            f"user_id={self.user_id}, role={self.role.value})>"
        )
