from typing import Optional
from sqlalchemy.orm import Session

from app.models.event_suggestion import EventSuggestion


class EventSuggestionRepository:
    """Repository for EventSuggestion data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, suggestion: EventSuggestion) -> EventSuggestion:
        """Create a new suggestion"""
        self.db.add(suggestion)
        self.db.commit()
        self.db.refresh(suggestion)
        return suggestion

    def get_by_id_and_event(self, suggestion_id: int, event_id: int) -> Optional[EventSuggestion]:
        """Get suggestion by ID, ensuring it belongs to the event"""
        return (
            self.db.query(EventSuggestion)
            .filter(
                EventSuggestion.id == suggestion_id,
                EventSuggestion.event_id == event_id,
            )
            .first()
        )

    def get_by_event(self, event_id: int) -> list[EventSuggestion]:
        """Get all suggestions for an event, newest first"""
        return (
            self.db.query(EventSuggestion)
            .filter(EventSuggestion.event_id == event_id)
            .order_by(EventSuggestion.id.desc())
            .all()
        )

    def update(self, suggestion: EventSuggestion) -> EventSuggestion:
        """Update a suggestion"""
        self.db.commit()
        self.db.refresh(suggestion)
        return suggestion
