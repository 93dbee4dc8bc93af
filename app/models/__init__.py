# Import all models so SQLAlchemy can resolve string relationships
from app.models.base import Base
from app.models.user import User
from app.models.household import Household
from app.models.household_membership import HouseholdMembership
from app.models.event import Event, EventTag
from app.models.event_suggestion import EventSuggestion, SuggestionStatus
from app.models.todo import Todo, TodoPriority, TodoVisibility

__all__ = [
    "Base",
    "User",
    "Household",
    "HouseholdMembership",
    "Event",
    "EventTag",
    "EventSuggestion",
    "SuggestionStatus",
    "Todo",
    "TodoPriority",
    "TodoVisibility",
]
