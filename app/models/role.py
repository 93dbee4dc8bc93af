"""Household role enum for role-based access control."""

from enum import Enum as PyEnum


class HouseholdRole(str, PyEnum):
    """
    Household membership roles.

    Role Hierarchy (highest to lowest):
    1. ADMIN - Full control over household events, manages members
    2. MEMBER - Creates events, sees household events by default
    3. VIEWER - Sees household events by default, cannot create events

    Event-level access is not decided by role alone: the tags on an event
    refine what MEMBER and VIEWER users may do with it (see
    app.core.permissions).
    """

    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: "HouseholdRole | str | None") -> "HouseholdRole | None":
        """Return the matching role, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
