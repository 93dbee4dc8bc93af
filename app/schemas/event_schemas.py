from datetime import datetime, UTC
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional

from app.core.permissions import PermissionLevel
from app.models.event_suggestion import SuggestionStatus


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


class EventTagSchema(BaseModel):
    """Access-control tag; permission "view" means "use the role defaults" """

    model_config = {"from_attributes": True}

    name: str = Field(..., min_length=1, max_length=100)
    permission: PermissionLevel = PermissionLevel.VIEW


class EventCreate(BaseModel):
    """Schema for creating a new event"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    start_time: datetime
    end_time: datetime
    category: Optional[str] = Field(None, max_length=100)
    assigned_to: Optional[int] = Field(None, gt=0)
    tags: list[EventTagSchema] = Field(default_factory=list)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_time_range(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class EventUpdate(BaseModel):
    """Schema for updating an event (tags, when given, replace the current set)"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)
    assigned_to: Optional[int] = Field(None, gt=0)
    tags: Optional[list[EventTagSchema]] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class EventResponse(BaseModel):
    """Schema for event response"""

    model_config = {"from_attributes": True}

    id: int
    household_id: int
    title: str
    description: Optional[str]
    start_time: datetime
    end_time: datetime
    category: Optional[str]
    created_by: int
    assigned_to: Optional[int]
    external_event_id: Optional[str]
    tags: list[EventTagSchema]
    created_at: datetime
    updated_at: datetime


class EventListResponse(BaseModel):
    """Schema for list of events"""

    events: list[EventResponse]
    total: int


class EventPermissionResponse(BaseModel):
    """Caller's access to one event"""

    event_id: int
    level: PermissionLevel
    can_view: bool
    can_suggest: bool
    can_edit: bool


class EventSuggestionCreate(BaseModel):
    """Proposed changes; only provided fields are suggested"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_dump(exclude_unset=True):
            raise ValueError("suggestion must change at least one field")
        return self


class EventSuggestionResponse(BaseModel):
    """Schema for suggestion response"""

    model_config = {"from_attributes": True}

    id: int
    event_id: int
    suggested_by: int
    original_data: dict
    suggested_data: dict
    status: SuggestionStatus
    reviewed_by: Optional[int]
    reviewed_at: Optional[datetime]
    created_at: datetime


class EventSyncResponse(BaseModel):
    """Events eligible for the caller's external calendar"""

    events: list[EventResponse]
    total: int
