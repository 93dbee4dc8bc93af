import logging
import secrets

from sqlalchemy.orm import Session
from app.config import settings
from app.models.household import Household
from app.models.household_membership import HouseholdMembership
from app.models.user import User
from app.models.household_context import HouseholdContext
from app.models.role import HouseholdRole
from app.repositories.household_repository import HouseholdRepository
from app.repositories.household_membership_repository import HouseholdMembershipRepository
from app.repositories.user_repository import UserRepository
from app.schemas.household_schemas import HouseholdCreate, HouseholdRoleUpdate
from app.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class HouseholdService:
    """Service layer for household and membership business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.household_repo = HouseholdRepository(db)
        self.membership_repo = HouseholdMembershipRepository(db)
        self.user_repo = UserRepository(db)

    def _new_invite_code(self) -> str:
        while True:
            code = secrets.token_urlsafe(settings.INVITE_CODE_BYTES)
            if not self.household_repo.invite_code_exists(code):
                return code

    def create_household(self, data: HouseholdCreate, user: User) -> Household:
        """
        Create a household with the creator as its first ADMIN.

        Household and membership are committed together.

        Args:
            data: Household name and description
            user: Authenticated user (becomes ADMIN)

        Returns:
            Created household
        """
        household = Household(
            name=data.name,
            description=data.description,
            invite_code=self._new_invite_code(),
            created_by=user.id,
        )
        self.household_repo.create_no_commit(household)
        self.membership_repo.create_no_commit(
            HouseholdMembership(
                household_id=household.id,
                user_id=user.id,
                role=HouseholdRole.ADMIN,
            )
        )
        self.db.commit()
        self.db.refresh(household)

        logger.info("User %s created household %s", user.id, household.id)
        return household

    def list_user_households(self, user: User) -> list[dict]:
        """
        List all households that a user belongs to.

        Args:
            user: Authenticated user

        Returns:
            List of households with user's role in each household
        """
        memberships = self.membership_repo.get_user_memberships(user.id)

        result = []
        for membership in memberships:
            household = self.household_repo.get_by_id(membership.household_id)
            if household:
                result.append(
                    {
                        "id": household.id,
                        "name": household.name,
                        "description": household.description,
                        "role": membership.role,
                        "member_count": self.membership_repo.count_members(household.id),
                        "created_at": household.created_at,
                    }
                )
        return result

    def join_household(self, invite_code: str, user: User) -> HouseholdMembership:
        """
        Join a household by invite code as MEMBER.

        Raises:
            NotFoundException: If no household has this invite code
            ValidationException: If user is already a member
        """
        household = self.household_repo.get_by_invite_code(invite_code)
        if not household:
            raise NotFoundException("Invalid invite code")

        if self.membership_repo.get_membership(user.id, household.id):
            raise ValidationException("Already a member of this household")

        membership = self.membership_repo.create(
            HouseholdMembership(
                household_id=household.id,
                user_id=user.id,
                role=HouseholdRole.MEMBER,
            )
        )
        logger.info("User %s joined household %s", user.id, household.id)
        return membership

    def member_details(self, membership: HouseholdMembership, user: User | None = None) -> dict:
        """Membership enriched with the member's user info"""
        if user is None:
            user = self.user_repo.get_by_id(membership.user_id)
        return {
            "id": membership.id,
            "user_id": membership.user_id,
            "auth_user_id": user.auth_user_id if user else "unknown",
            "display_name": user.display_name if user else None,
            "role": membership.role,
            "joined_at": membership.joined_at,
        }

    def get_members(self, context: HouseholdContext) -> list[dict]:
        """
        Get all members of the household with user details.

        Args:
            context: Household context

        Returns:
            List of members with user info
        """
        memberships = self.membership_repo.get_household_members(context.household.id)
        users = self.user_repo.get_by_ids(membership.user_id for membership in memberships)
        return [
            self.member_details(membership, users.get(membership.user_id))
            for membership in memberships
        ]

    def update_member_role(
        self, user_id: int, role_update: HouseholdRoleUpdate, context: HouseholdContext
    ) -> HouseholdMembership:
        """
        Update member's role (ADMIN only).

        Args:
            user_id: User ID to update
            role_update: New role
            context: Household context

        Returns:
            Updated membership

        Raises:
            ForbiddenException: If user is not ADMIN or changes their own role
            NotFoundException: If membership not found
        """
        if not context.is_admin():
            logger.warning(
                "User %s denied role change in household %s", context.user.id, context.household.id
            )
            raise ForbiddenException("Only admins can change member roles")

        membership = self.membership_repo.get_membership(user_id, context.household.id)
        if not membership:
            raise NotFoundException("Member not found in this household")

        if user_id == context.user.id:
            raise ForbiddenException("Cannot change your own role")

        membership.role = role_update.role
        membership = self.membership_repo.update(membership)
        logger.info(
            "User %s set role of user %s in household %s to %s",
            context.user.id,
            user_id,
            context.household.id,
            membership.role.value,
        )
        return membership
