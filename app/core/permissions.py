"""
Tag-based event permissions.

Decides what a household member may do with an event (view it, suggest an
edit to it, or edit it) from the member's household role, their relationship
to the event and the access-control tags attached to the event.

Everything here is pure: no I/O, no logging, no shared mutable state. The
route and sync layers load events and roles first, then ask this module.
"""

from dataclasses import dataclass, field
from enum import Enum as PyEnum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Protocol, Sequence, TypeVar

from app.models.role import HouseholdRole


class PermissionLevel(str, PyEnum):
    """
    What a user may do with an event, ordered NONE < VIEW < SUGGEST < EDIT.

    Compare levels through `rank`; the str mixin would otherwise compare
    them alphabetically.
    """

    NONE = "none"
    VIEW = "view"
    SUGGEST = "suggest"
    EDIT = "edit"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    @classmethod
    def parse(cls, value: "PermissionLevel | str | None") -> "PermissionLevel | None":
        """Return the matching level, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_LEVEL_RANK = MappingProxyType(
    {
        PermissionLevel.NONE: 0,
        PermissionLevel.VIEW: 1,
        PermissionLevel.SUGGEST: 2,
        PermissionLevel.EDIT: 3,
    }
)


class EventAction(str, PyEnum):
    """Actions gated by `can_perform`."""

    VIEW = "view"
    SUGGEST = "suggest"
    EDIT = "edit"


_ACTION_LEVELS = MappingProxyType(
    {
        EventAction.VIEW: frozenset(
            {PermissionLevel.VIEW, PermissionLevel.SUGGEST, PermissionLevel.EDIT}
        ),
        EventAction.SUGGEST: frozenset({PermissionLevel.SUGGEST, PermissionLevel.EDIT}),
        EventAction.EDIT: frozenset({PermissionLevel.EDIT}),
    }
)


def _row(admin: PermissionLevel, member: PermissionLevel, viewer: PermissionLevel):
    return MappingProxyType(
        {
            HouseholdRole.ADMIN: admin,
            HouseholdRole.MEMBER: member,
            HouseholdRole.VIEWER: viewer,
        }
    )


_N, _V, _S, _E = (
    PermissionLevel.NONE,
    PermissionLevel.VIEW,
    PermissionLevel.SUGGEST,
    PermissionLevel.EDIT,
)

# Default level per (tag name, role) for tags without an explicit override.
# Tag names missing from this table grant nothing.
ROLE_TAG_PERMISSIONS: Mapping[str, Mapping[HouseholdRole, PermissionLevel]] = MappingProxyType(
    {
        "metamours": _row(admin=_E, member=_S, viewer=_V),
        "friends": _row(admin=_E, member=_E, viewer=_V),
        "family": _row(admin=_E, member=_E, viewer=_S),
        "work": _row(admin=_E, member=_V, viewer=_N),
        "personal": _row(admin=_S, member=_N, viewer=_N),
        "private": _row(admin=_N, member=_N, viewer=_N),
    }
)

# Household-wide visibility when no tag grants anything.
ROLE_DEFAULT_PERMISSIONS: Mapping[HouseholdRole, PermissionLevel] = MappingProxyType(
    {
        HouseholdRole.MEMBER: PermissionLevel.VIEW,
        HouseholdRole.VIEWER: PermissionLevel.VIEW,
    }
)

# Tag permission value that means "no override".
BASELINE_TAG_PERMISSION = PermissionLevel.VIEW


class EventTagLike(Protocol):
    name: str
    permission: str | None


class EventLike(Protocol):
    created_by: Any
    assigned_to: Any
    tags: Sequence[EventTagLike]


EventT = TypeVar("EventT")


@dataclass(frozen=True)
class PermissionContext:
    """
    Everything needed to evaluate one user's access to one event.

    Built fresh for each evaluation and thrown away afterwards.

    Attributes:
        user_id: Requesting user's identifier
        role: User's role in the household owning the event (free-form
            strings are accepted; unknown roles grant nothing)
        event_tags: Tags attached to the event
        is_creator: User created the event
        is_assignee: Event is assigned to the user
    """

    user_id: Any
    role: HouseholdRole | str | None
    event_tags: tuple = field(default_factory=tuple)
    is_creator: bool = False
    is_assignee: bool = False

    @classmethod
    def for_event(
        cls, event: EventLike, user_id: Any, role: HouseholdRole | str | None
    ) -> "PermissionContext":
        """Derive creator/assignee status by comparing the event's user ids."""
        return cls(
            user_id=user_id,
            role=role,
            event_tags=tuple(event.tags or ()),
            is_creator=event.created_by == user_id,
            is_assignee=event.assigned_to is not None and event.assigned_to == user_id,
        )


def _tag_fields(tag: EventTagLike | str) -> tuple[str, Any]:
    # Bare strings are tags without an override.
    if isinstance(tag, str):
        return tag, None
    return tag.name, tag.permission


def tag_permission(tag: EventTagLike | str, role: HouseholdRole | str | None) -> PermissionLevel:
    """
    Effective level a single tag grants to a role.

    An explicit tag permission other than the baseline "view" wins outright,
    whatever the role. Otherwise the role-tag table decides. An explicit value
    that is not a known level grants nothing.
    """
    name, explicit = _tag_fields(tag)

    if explicit and explicit != BASELINE_TAG_PERMISSION:
        return PermissionLevel.parse(explicit) or PermissionLevel.NONE

    household_role = HouseholdRole.parse(role)
    if household_role is None:
        return PermissionLevel.NONE

    row = ROLE_TAG_PERMISSIONS.get(name)
    if row is None:
        return PermissionLevel.NONE
    return row.get(household_role, PermissionLevel.NONE)


def evaluate(context: PermissionContext) -> PermissionLevel:
    """
    Compute the user's permission level for an event.

    Creators, household admins and assignees always get EDIT. Everyone else
    gets the highest level granted by any of the event's tags, falling back
    to the role default (VIEW for members and viewers) when no tag grants
    anything.
    """
    if context.is_creator:
        return PermissionLevel.EDIT

    role = HouseholdRole.parse(context.role)
    if role is HouseholdRole.ADMIN:
        return PermissionLevel.EDIT

    if context.is_assignee:
        return PermissionLevel.EDIT

    highest = PermissionLevel.NONE
    for tag in context.event_tags:
        level = tag_permission(tag, role)
        if level is PermissionLevel.EDIT:
            return PermissionLevel.EDIT
        if level.rank > highest.rank:
            highest = level

    if highest is PermissionLevel.NONE:
        return ROLE_DEFAULT_PERMISSIONS.get(role, PermissionLevel.NONE)

    return highest


def can_perform(action: EventAction | str, context: PermissionContext) -> bool:
    """Check whether the evaluated level allows `action` (view, suggest or edit)."""
    try:
        allowed = _ACTION_LEVELS[EventAction(action)]
    except ValueError:
        return False
    return evaluate(context) in allowed


def filter_for_display(
    events: Iterable[EventT], user_id: Any, role: HouseholdRole | str | None
) -> list[EventT]:
    """Keep the events the user may at least see, in their original order."""
    return [
        event
        for event in events
        if evaluate(PermissionContext.for_event(event, user_id, role)) is not PermissionLevel.NONE
    ]


def filter_for_external_sync(
    events: Iterable[EventT], user_id: Any, role: HouseholdRole | str | None
) -> list[EventT]:
    """
    Select the events to push into the user's personal external calendar.

    Visibility alone is not enough: the user must own the event (creator or
    assignee) or hold full EDIT access to it. Suggest- and view-only household
    events stay out of private calendar feeds.
    """
    selected = []
    for event in events:
        context = PermissionContext.for_event(event, user_id, role)
        level = evaluate(context)
        if level is PermissionLevel.NONE:
            continue
        if context.is_creator or context.is_assignee or level is PermissionLevel.EDIT:
            selected.append(event)
    return selected
