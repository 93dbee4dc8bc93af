from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session, selectinload

from app.models.event import Event, EventTag


class EventRepository:
    """Repository for Event data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, event: Event) -> Event:
        """Create a new event together with its tags"""
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def get_by_id_and_household(self, event_id: int, household_id: int) -> Optional[Event]:
        """
        Get event by ID, ensuring it belongs to the household.

        Args:
            event_id: Event ID
            household_id: Household ID

        Returns:
            Event object or None if not found or belongs to different household
        """
        return (
            self.db.query(Event)
            .options(selectinload(Event.tags))
            .filter(Event.id == event_id, Event.household_id == household_id)
            .first()
        )

    def get_household_events(
        self,
        household_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Event]:
        """
        Get household events whose start time falls in [start, end].

        Unfiltered by permissions; callers pass the result through the
        display or sync filter.

        Args:
            household_id: Household ID for isolation
            start: Optional lower bound on start_time (inclusive)
            end: Optional upper bound on start_time (inclusive)

        Returns:
            Events ordered by start time
        """
        query = (
            self.db.query(Event)
            .options(selectinload(Event.tags))
            .filter(Event.household_id == household_id)
        )

        if start is not None:
            query = query.filter(Event.start_time >= start)

        if end is not None:
            query = query.filter(Event.start_time <= end)

        return query.order_by(Event.start_time.asc(), Event.id.asc()).all()

    def replace_tags_no_commit(self, event: Event, tags: list[EventTag]) -> Event:
        """
        Swap the event's tag set. Removed tags are deleted through the
        delete-orphan cascade. Caller responsible for commit.
        """
        event.tags = tags
        self.db.flush()
        return event

    def update(self, event: Event) -> Event:
        """Update an event"""
        self.db.commit()
        self.db.refresh(event)
        return event

    def delete(self, event: Event) -> None:
        """Delete an event (tags and suggestions cascade)"""
        self.db.delete(event)
        self.db.commit()
