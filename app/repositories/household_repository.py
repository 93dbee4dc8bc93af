"""Repository for Household model operations."""

from sqlalchemy.orm import Session
from app.models.household import Household


class HouseholdRepository:
    """Repository for Household model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, household_id: int) -> Household | None:
        """
        Get household by ID.

        Args:
            household_id: Household ID

        Returns:
            Household object or None if not found
        """
        return self.db.query(Household).filter(Household.id == household_id).first()

    def get_by_invite_code(self, invite_code: str) -> Household | None:
        """Get household by its invite code"""
        return self.db.query(Household).filter(Household.invite_code == invite_code).first()

    def invite_code_exists(self, invite_code: str) -> bool:
        return self.get_by_invite_code(invite_code) is not None

    def create_no_commit(self, household: Household) -> Household:
        """
        Add a household without committing (for atomic ops with the
        creator's membership). Caller responsible for commit.
        """
        self.db.add(household)
        self.db.flush()
        return household

