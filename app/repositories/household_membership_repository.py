"""Repository for HouseholdMembership model operations."""

from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.household_membership import HouseholdMembership


class HouseholdMembershipRepository:
    """Repository for HouseholdMembership model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_membership(self, user_id: int, household_id: int) -> HouseholdMembership | None:
        """
        Get membership for a specific user in a specific household.

        Args:
            user_id: User ID
            household_id: Household ID

        Returns:
            HouseholdMembership object or None if not found
        """
        return (
            self.db.query(HouseholdMembership)
            .filter(
                HouseholdMembership.user_id == user_id,
                HouseholdMembership.household_id == household_id,
            )
            .first()
        )

    def get_household_members(self, household_id: int) -> list[HouseholdMembership]:
        """
        Get all memberships for a household, oldest first.

        Args:
            household_id: Household ID

        Returns:
            List of HouseholdMembership objects for the household
        """
        return (
            self.db.query(HouseholdMembership)
            .filter(HouseholdMembership.household_id == household_id)
            .order_by(HouseholdMembership.id)
            .all()
        )

    def get_user_memberships(self, user_id: int) -> list[HouseholdMembership]:
        """
        Get all memberships for a user (all households they belong to).

        Args:
            user_id: User ID

        Returns:
            List of HouseholdMembership objects for the user
        """
        return (
            self.db.query(HouseholdMembership)
            .filter(HouseholdMembership.user_id == user_id)
            .order_by(HouseholdMembership.id)
            .all()
        )

    def count_members(self, household_id: int) -> int:
        """Number of members in a household"""
        return (
            self.db.query(func.count(HouseholdMembership.id))
            .filter(HouseholdMembership.household_id == household_id)
            .scalar()
        )

    def create(self, membership: HouseholdMembership) -> HouseholdMembership:
        """
        Create a new household membership.

        Args:
            membership: HouseholdMembership object to create

        Returns:
            Created HouseholdMembership object with ID populated

        Raises:
            IntegrityError: If (household_id, user_id) already exists
        """
        self.db.add(membership)
        self.db.commit()
        self.db.refresh(membership)
        return membership

    def create_no_commit(self, membership: HouseholdMembership) -> HouseholdMembership:
        """Create membership without committing (for atomic ops)"""
        self.db.add(membership)
        self.db.flush()
        return membership

    def update(self, membership: HouseholdMembership) -> HouseholdMembership:
        """
        Update a household membership.

        Args:
            membership: HouseholdMembership object to update

        Returns:
            Updated HouseholdMembership object
        """
        self.db.commit()
        self.db.refresh(membership)
        return membership
