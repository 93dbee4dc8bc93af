from typing import Iterable
from sqlalchemy.orm import Session
from app.models.user import User


class UserRepository:
    """Repository for users mirrored from the auth service"""

    def __init__(self, db: Session):
        self.db = db

    def upsert_from_token(self, auth_user_id: str, display_name: str | None = None) -> User:
        """
        Get or create the user behind a validated JWT.

        A display name carried by the token replaces the stored one; tokens
        without one leave it untouched.

        Args:
            auth_user_id: 'sub' claim
            display_name: Name claim, if the token has one

        Returns:
            The stored user
        """
        user = self.get_by_auth_id(auth_user_id)

        if not user:
            user = User(auth_user_id=auth_user_id, display_name=display_name)
            self.db.add(user)
        elif display_name and user.display_name != display_name:
            user.display_name = display_name
        else:
            return user

        self.db.commit()
        self.db.refresh(user)
        return user

    def get_by_auth_id(self, auth_user_id: str) -> User | None:
        return self.db.query(User).filter(User.auth_user_id == auth_user_id).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_ids(self, user_ids: Iterable[int]) -> dict[int, User]:
        """Users keyed by internal ID; unknown IDs are left out"""
        ids = set(user_ids)
        if not ids:
            return {}
        return {user.id: user for user in self.db.query(User).filter(User.id.in_(ids))}
