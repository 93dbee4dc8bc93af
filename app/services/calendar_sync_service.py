"""Selection and push of household events into users' external calendars."""

import logging
from typing import Protocol

from sqlalchemy.orm import Session

from app.core.permissions import filter_for_external_sync
from app.models.event import Event
from app.models.household_context import HouseholdContext
from app.models.user import User
from app.repositories.event_repository import EventRepository

logger = logging.getLogger(__name__)


class CalendarSyncClient(Protocol):
    """
    Connected external calendar account (e.g. Google Calendar).

    Implementations own OAuth and the remote API; they only need to push one
    event and return the remote event id.
    """

    def push_event(self, user: User, event: Event) -> str: ...


class CalendarSyncService:
    """Service layer deciding which events reach a user's external calendar"""

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)

    def eligible_events(self, context: HouseholdContext) -> list[Event]:
        """
        Household events that may be pushed to the caller's external calendar.

        Only events the caller created, is assigned, or holds EDIT access to
        qualify; view/suggest-only events stay inside the household.
        """
        events = self.event_repo.get_household_events(context.household.id)
        return filter_for_external_sync(events, context.user.id, context.role)

    def sync_household(self, context: HouseholdContext, client: CalendarSyncClient) -> list[Event]:
        """
        Push every eligible event through `client`.

        The remote id is stored on events the caller created, so the
        creator's calendar copy can be found again. Client errors propagate;
        ids recorded before the failure are kept.

        Returns:
            The pushed events, in start time order
        """
        events = self.eligible_events(context)
        pushed = []
        for event in events:
            external_id = client.push_event(context.user, event)
            if event.created_by == context.user.id:
                # Committed per event: the remote copy already exists, so its id
                # must survive a later push failing
                event.external_event_id = external_id
                self.db.commit()
            pushed.append(event)

        logger.info(
            "Pushed %d of household %s events to user %s external calendar",
            len(pushed),
            context.household.id,
            context.user.id,
        )
        return pushed
