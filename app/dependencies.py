from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.security import extract_identity
from app.core.exceptions import UnauthorizedException, NotFoundException, ForbiddenException
from app.database import get_db
from app.repositories.user_repository import UserRepository
from app.repositories.household_repository import HouseholdRepository
from app.repositories.household_membership_repository import HouseholdMembershipRepository
from app.models.household_context import HouseholdContext
from app.models.user import User

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to validate JWT and get/create user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract auth_user_id ('sub') and display name claims
    4. Get or auto-create User record, refreshing its display name
    5. Return User object for use in endpoints

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        token = credentials.credentials
        auth_user_id, display_name = extract_identity(token)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_repo = UserRepository(db)
    return user_repo.upsert_from_token(auth_user_id, display_name)


async def get_household_context(
    household_id: int = Path(..., gt=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> HouseholdContext:
    """
    FastAPI dependency resolving the caller's membership in the household
    named in the URL.

    Raises:
        NotFoundException: If household doesn't exist
        ForbiddenException: If user is not a member of the household
    """
    household = HouseholdRepository(db).get_by_id(household_id)
    if not household:
        raise NotFoundException(f"Household {household_id} not found")

    membership = HouseholdMembershipRepository(db).get_membership(user.id, household.id)
    if not membership:
        raise ForbiddenException("You are not a member of this household")

    return HouseholdContext(user=user, household=household, role=membership.role)
