"""Household model: the sharing boundary for events and todos."""

from sqlalchemy import String, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.household_membership import HouseholdMembership
    from app.models.event import Event
    from app.models.todo import Todo


class Household(Base, TimestampMixin):
    """
    A group of users sharing a calendar.

    Users join through an invite code and hold one role per household
    (admin, member, viewer). A user may belong to several households, e.g.
    "Smith Family" and "Book Club", with a different role in each.
    """

    __tablename__ = "households"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    invite_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )

    # Relationships
    memberships: Mapped[list["HouseholdMembership"]] = relationship(
        "HouseholdMembership",
        back_populates="household",
        cascade="all, delete-orphan",
    )
    events: Mapped[list["Event"]] = relationship(
        "Event",
        back_populates="household",
        cascade="all, delete-orphan",
    )
    todos: Mapped[list["Todo"]] = relationship(
        "Todo",
        back_populates="household",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Household(id={self.id}, name='{self.name}')>"
