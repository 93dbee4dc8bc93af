from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, ForeignKey, DateTime, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.event import Event


class SuggestionStatus(str, PyEnum):
    """Suggestion review state"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventSuggestion(Base, TimestampMixin):
    """
    Proposed change to an event from a user with SUGGEST access.

    original_data snapshots the suggested fields as they were when the
    suggestion was made; suggested_data holds the proposed values. A user
    with EDIT access approves (applies) or rejects it.
    """

    __tablename__ = "event_suggestions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    suggested_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    original_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    suggested_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[SuggestionStatus] = mapped_column(
        Enum(SuggestionStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=SuggestionStatus.PENDING,
    )
    reviewed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    event: Mapped["Event"] = relationship("Event", back_populates="suggestions")
