"""Household context for request authorization."""

from dataclasses import dataclass

from app.core.permissions import PermissionContext, EventLike
from app.models.user import User
from app.models.household import Household
from app.models.role import HouseholdRole


@dataclass
class HouseholdContext:
    """
    Household context for request authorization.

    Built per request from the JWT user and the household in the URL,
    verified against the user's membership.

    Attributes:
        user: The authenticated User object
        household: The Household being accessed
        role: The user's role within this household
    """

    user: User
    household: Household
    role: HouseholdRole

    def is_admin(self) -> bool:
        """Check if user is a household admin."""
        return self.role == HouseholdRole.ADMIN

    def can_contribute(self) -> bool:
        """Admins and members create events and todos; viewers cannot."""
        return self.role in (HouseholdRole.ADMIN, HouseholdRole.MEMBER)

    def permission_context(self, event: EventLike) -> PermissionContext:
        """Build the per-event permission context for this user."""
        return PermissionContext.for_event(event, self.user.id, self.role)

    def __repr__(self) -> str:
        return (
            f"<HouseholdContext(user_id={self.user.id}, household_id={self.household.id}, "
            f"role={self.role.value})>"
        )
