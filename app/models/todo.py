from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, DateTime, Text, Boolean, Enum, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.household import Household


class TodoPriority(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TodoVisibility(str, PyEnum):
    """
    Who sees a todo.

    HOUSEHOLD: every member of the household
    PERSONAL: only the creator and the assignee
    """

    HOUSEHOLD = "household"
    PERSONAL = "personal"


class Todo(Base, TimestampMixin):
    """
    Shared household task.

    Tags are free-form labels stored as a JSON array; unlike event tags
    they carry no access control.
    """

    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    household_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("households.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    priority: Mapped[TodoPriority] = mapped_column(
        Enum(TodoPriority, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TodoPriority.MEDIUM,
    )
    visibility: Mapped[TodoVisibility] = mapped_column(
        Enum(TodoVisibility, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TodoVisibility.HOUSEHOLD,
    )
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True, default=list)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    household: Mapped["Household"] = relationship("Household", back_populates="todos")

    __table_args__ = (
        Index("ix_todos_household_completed", "household_id", "completed"),
    )

    def is_involved(self, user_id: int) -> bool:
        """Creator or assignee"""
        return user_id in (self.created_by, self.assigned_to)

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, household_id={self.household_id}, title='{self.title}')>"
