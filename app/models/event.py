from datetime import datetime
from sqlalchemy import String, Integer, ForeignKey, DateTime, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.household import Household
    from app.models.event_suggestion import EventSuggestion


class Event(Base, TimestampMixin):
    """
    Calendar event owned by a household.

    Who may see or change an event is decided per request from its tags,
    creator and assignee (see app.core.permissions).
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    household_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("households.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # Set once the event has been pushed to the creator's external calendar
    external_event_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    household: Mapped["Household"] = relationship("Household", back_populates="events")
    tags: Mapped[list["EventTag"]] = relationship(
        "EventTag",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventTag.id",
    )
    suggestions: Mapped[list["EventSuggestion"]] = relationship(
        "EventSuggestion",
        back_populates="event",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_events_household_start", "household_id", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, household_id={self.household_id}, title='{self.title}')>"


class EventTag(Base):
    """
    Access-control tag on an event.

    permission defaults to "view", which means "use the role-tag table".
    Any other value overrides the table for every role.
    """

    __tablename__ = "event_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    permission: Mapped[str] = mapped_column(String(20), nullable=False, default="view")

    event: Mapped["Event"] = relationship("Event", back_populates="tags")

    def __repr__(self) -> str:
        return f"<EventTag(event_id={self.event_id}, name='{self.name}', permission='{self.permission}')>"
