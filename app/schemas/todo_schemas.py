from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.models.todo import TodoPriority, TodoVisibility
from app.schemas.event_schemas import to_naive_utc


def _clean_tags(tags: Optional[list[str]]) -> Optional[list[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class TodoCreate(BaseModel):
    """Schema for creating a new todo"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    due_date: Optional[datetime] = None
    priority: TodoPriority = TodoPriority.MEDIUM
    visibility: TodoVisibility = TodoVisibility.HOUSEHOLD
    tags: list[str] = Field(default_factory=list, max_length=20)
    assigned_to: Optional[int] = Field(None, gt=0)

    @field_validator("due_date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class TodoUpdate(BaseModel):
    """Schema for updating a todo (explicit nulls clear optional fields)"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    priority: Optional[TodoPriority] = None
    visibility: Optional[TodoVisibility] = None
    tags: Optional[list[str]] = Field(None, max_length=20)
    assigned_to: Optional[int] = Field(None, gt=0)

    @field_validator("due_date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_tags(v)


class TodoResponse(BaseModel):
    """Schema for todo response"""

    model_config = {"from_attributes": True}

    id: int
    household_id: int
    title: str
    description: Optional[str]
    completed: bool
    due_date: Optional[datetime]
    priority: TodoPriority
    visibility: TodoVisibility
    tags: list[str]
    created_by: int
    assigned_to: Optional[int]
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def tags_default(cls, v):
        return v or []


class TodoListResponse(BaseModel):
    """Schema for list of todos"""

    todos: list[TodoResponse]
    total: int
