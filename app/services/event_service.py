import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from app.core.permissions import (
    EventAction,
    PermissionLevel,
    can_perform,
    evaluate,
    filter_for_display,
)
from app.models.base import utcnow
from app.models.event import Event, EventTag
from app.models.event_suggestion import EventSuggestion, SuggestionStatus
from app.models.household_context import HouseholdContext
from app.repositories.event_repository import EventRepository
from app.repositories.event_suggestion_repository import EventSuggestionRepository
from app.repositories.household_membership_repository import HouseholdMembershipRepository
from app.schemas.event_schemas import (
    EventCreate,
    EventUpdate,
    EventTagSchema,
    EventSuggestionCreate,
    to_naive_utc,
)
from app.core.exceptions import NotFoundException, ForbiddenException, ValidationException

logger = logging.getLogger(__name__)

# Event fields a suggestion may change
SUGGESTIBLE_FIELDS = ("title", "description", "start_time", "end_time", "category")


def _build_tags(tags: list[EventTagSchema]) -> list[EventTag]:
    # Duplicate names carry no extra meaning; keep the first occurrence
    seen = set()
    result = []
    for tag in tags:
        if tag.name in seen:
            continue
        seen.add(tag.name)
        result.append(EventTag(name=tag.name, permission=tag.permission.value))
    return result


def _json_value(value):
    return value.isoformat() if isinstance(value, datetime) else value


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)
        self.suggestion_repo = EventSuggestionRepository(db)
        self.membership_repo = HouseholdMembershipRepository(db)

    def _check_assignee(self, assigned_to: Optional[int], context: HouseholdContext) -> None:
        if assigned_to is None:
            return
        if not self.membership_repo.get_membership(assigned_to, context.household.id):
            raise ValidationException(f"User {assigned_to} is not a member of this household")

    def _get_event_for(
        self, event_id: int, context: HouseholdContext, action: EventAction
    ) -> Event:
        """
        Load an event and check the caller may perform `action` on it.

        Events the caller cannot see at all are reported as missing.

        Raises:
            NotFoundException: If event doesn't exist, belongs to another
                household, or is invisible to the caller
            ForbiddenException: If the caller sees the event but lacks `action`
        """
        event = self.event_repo.get_by_id_and_household(event_id, context.household.id)
        if not event:
            raise NotFoundException(f"Event {event_id} not found")

        permission_context = context.permission_context(event)
        if evaluate(permission_context) is PermissionLevel.NONE:
            raise NotFoundException(f"Event {event_id} not found")

        if not can_perform(action, permission_context):
            logger.warning(
                "User %s denied %s on event %s", context.user.id, action.value, event_id
            )
            raise ForbiddenException(f"You do not have {action.value} permission for this event")

        return event

    def create_event(self, event_data: EventCreate, context: HouseholdContext) -> Event:
        """
        Create a new event with its tags.

        Args:
            event_data: Event creation data
            context: Household context (caller becomes the creator)

        Returns:
            Created event

        Raises:
            ForbiddenException: If caller is a VIEWER
            ValidationException: If assignee is not a household member
        """
        if not context.can_contribute():
            raise ForbiddenException("Viewers cannot create events")

        self._check_assignee(event_data.assigned_to, context)

        event = Event(
            household_id=context.household.id,
            title=event_data.title,
            description=event_data.description,
            start_time=event_data.start_time,
            end_time=event_data.end_time,
            category=event_data.category,
            created_by=context.user.id,
            assigned_to=event_data.assigned_to,
            tags=_build_tags(event_data.tags),
        )
        event = self.event_repo.create(event)
        logger.info(
            "User %s created event %s in household %s",
            context.user.id,
            event.id,
            context.household.id,
        )
        return event

    def list_events(
        self,
        context: HouseholdContext,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Event]:
        """
        List household events the caller may see.

        Args:
            context: Household context
            start: Optional lower bound on start_time (inclusive)
            end: Optional upper bound on start_time (inclusive)

        Returns:
            Visible events ordered by start time
        """
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start is not None and end is not None and end < start:
            raise ValidationException("end must not be before start")

        events = self.event_repo.get_household_events(context.household.id, start, end)
        return filter_for_display(events, context.user.id, context.role)

    def get_event(self, event_id: int, context: HouseholdContext) -> Event:
        """Get an event the caller may see"""
        return self._get_event_for(event_id, context, EventAction.VIEW)

    def get_event_permission(self, event_id: int, context: HouseholdContext) -> dict:
        """
        Describe the caller's access to an event.

        Returns:
            Level and per-action flags
        """
        event = self._get_event_for(event_id, context, EventAction.VIEW)
        permission_context = context.permission_context(event)
        return {
            "event_id": event.id,
            "level": evaluate(permission_context),
            "can_view": can_perform(EventAction.VIEW, permission_context),
            "can_suggest": can_perform(EventAction.SUGGEST, permission_context),
            "can_edit": can_perform(EventAction.EDIT, permission_context),
        }

    def update_event(
        self, event_id: int, event_data: EventUpdate, context: HouseholdContext
    ) -> Event:
        """
        Update an event (EDIT permission required).

        Args:
            event_id: Event ID
            event_data: Fields to change; tags, when given, replace the set
            context: Household context

        Returns:
            Updated event

        Raises:
            NotFoundException: If event doesn't exist or is invisible to caller
            ForbiddenException: If caller lacks EDIT permission
            ValidationException: If the time range or assignee is invalid
        """
        event = self._get_event_for(event_id, context, EventAction.EDIT)

        start_time = event_data.start_time or event.start_time
        end_time = event_data.end_time or event.end_time
        if end_time < start_time:
            raise ValidationException("end_time must not be before start_time")

        if "assigned_to" in event_data.model_fields_set:
            self._check_assignee(event_data.assigned_to, context)
            event.assigned_to = event_data.assigned_to

        if event_data.title is not None:
            event.title = event_data.title
        # Explicit nulls clear the optional fields
        for name in ("description", "category"):
            if name in event_data.model_fields_set:
                setattr(event, name, getattr(event_data, name))
        event.start_time = start_time
        event.end_time = end_time

        if event_data.tags is not None:
            self.event_repo.replace_tags_no_commit(event, _build_tags(event_data.tags))

        event = self.event_repo.update(event)
        logger.info("User %s updated event %s", context.user.id, event.id)
        return event

    def delete_event(self, event_id: int, context: HouseholdContext) -> None:
        """
        Delete an event (EDIT permission required).

        Raises:
            NotFoundException: If event doesn't exist or is invisible to caller
            ForbiddenException: If caller lacks EDIT permission
        """
        event = self._get_event_for(event_id, context, EventAction.EDIT)
        self.event_repo.delete(event)
        logger.info("User %s deleted event %s", context.user.id, event_id)

    def suggest_edit(
        self, event_id: int, suggestion_data: EventSuggestionCreate, context: HouseholdContext
    ) -> EventSuggestion:
        """
        Record a proposed change to an event (SUGGEST permission required).

        Raises:
            NotFoundException: If event doesn't exist or is invisible to caller
            ForbiddenException: If caller lacks SUGGEST permission
        """
        event = self._get_event_for(event_id, context, EventAction.SUGGEST)

        suggested = suggestion_data.model_dump(mode="json", exclude_unset=True)
        original = {name: _json_value(getattr(event, name)) for name in suggested}

        suggestion = self.suggestion_repo.create(
            EventSuggestion(
                event_id=event.id,
                suggested_by=context.user.id,
                original_data=original,
                suggested_data=suggested,
                status=SuggestionStatus.PENDING,
            )
        )
        logger.info(
            "User %s suggested changes %s to event %s", context.user.id, sorted(suggested), event.id
        )
        return suggestion

    def list_suggestions(self, event_id: int, context: HouseholdContext) -> list[EventSuggestion]:
        """List suggestions for an event the caller may see"""
        event = self._get_event_for(event_id, context, EventAction.VIEW)
        return self.suggestion_repo.get_by_event(event.id)

    def _get_pending_suggestion(
        self, event: Event, suggestion_id: int
    ) -> EventSuggestion:
        suggestion = self.suggestion_repo.get_by_id_and_event(suggestion_id, event.id)
        if not suggestion:
            raise NotFoundException(f"Suggestion {suggestion_id} not found")
        if suggestion.status != SuggestionStatus.PENDING:
            raise ValidationException(f"Suggestion {suggestion_id} was already {suggestion.status.value}")
        return suggestion

    def _mark_reviewed(
        self, suggestion: EventSuggestion, status: SuggestionStatus, context: HouseholdContext
    ) -> None:
        suggestion.status = status
        suggestion.reviewed_by = context.user.id
        suggestion.reviewed_at = utcnow()

    def approve_suggestion(
        self, event_id: int, suggestion_id: int, context: HouseholdContext
    ) -> EventSuggestion:
        """
        Apply a pending suggestion to its event (EDIT permission required).

        Raises:
            NotFoundException: If event or suggestion doesn't exist
            ForbiddenException: If caller lacks EDIT permission
            ValidationException: If suggestion is not pending or would leave
                the event ending before it starts
        """
        event = self._get_event_for(event_id, context, EventAction.EDIT)
        suggestion = self._get_pending_suggestion(event, suggestion_id)

        changes = EventSuggestionCreate.model_validate(suggestion.suggested_data)
        for name in changes.model_fields_set & set(SUGGESTIBLE_FIELDS):
            setattr(event, name, getattr(changes, name))

        if event.end_time < event.start_time:
            self.db.rollback()
            raise ValidationException("Suggestion would end the event before it starts")

        self._mark_reviewed(suggestion, SuggestionStatus.APPROVED, context)
        suggestion = self.suggestion_repo.update(suggestion)
        logger.info("User %s approved suggestion %s", context.user.id, suggestion.id)
        return suggestion

    def reject_suggestion(
        self, event_id: int, suggestion_id: int, context: HouseholdContext
    ) -> EventSuggestion:
        """
        Reject a pending suggestion (EDIT permission required).

        Raises:
            NotFoundException: If event or suggestion doesn't exist
            ForbiddenException: If caller lacks EDIT permission
            ValidationException: If suggestion is not pending
        """
        event = self._get_event_for(event_id, context, EventAction.EDIT)
        suggestion = self._get_pending_suggestion(event, suggestion_id)

        self._mark_reviewed(suggestion, SuggestionStatus.REJECTED, context)
        suggestion = self.suggestion_repo.update(suggestion)
        logger.info("User %s rejected suggestion %s", context.user.id, suggestion.id)
        return suggestion
