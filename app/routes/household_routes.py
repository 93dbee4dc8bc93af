from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_household_context, get_current_user
from app.models.household_context import HouseholdContext
from app.models.user import User
from app.services.household_service import HouseholdService
from app.schemas.household_schemas import (
    HouseholdCreate,
    HouseholdResponse,
    UserHouseholdResponse,
    HouseholdJoinRequest,
    HouseholdMemberResponse,
    HouseholdRoleUpdate,
)

router = APIRouter()


@router.post("", response_model=HouseholdResponse, status_code=status.HTTP_201_CREATED)
async def create_household(
    data: HouseholdCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a household.

    - The creator becomes the household's first ADMIN
    - A random invite code is generated for others to join
    """
    service = HouseholdService(db)
    return service.create_household(data, user)


@router.get("", response_model=list[UserHouseholdResponse])
async def list_user_households(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List all households the authenticated user belongs to.

    Returns each household with the user's role in it.
    """
    service = HouseholdService(db)
    return service.list_user_households(user)


@router.post("/join", response_model=HouseholdMemberResponse, status_code=status.HTTP_201_CREATED)
async def join_household(
    join_request: HouseholdJoinRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Join a household with its invite code.

    - New members join with the MEMBER role
    - Returns 404 for an unknown code, 400 if already a member
    """
    service = HouseholdService(db)
    membership = service.join_household(join_request.invite_code, user)
    return service.member_details(membership)


@router.get("/{household_id}", response_model=HouseholdResponse)
async def get_household(context: HouseholdContext = Depends(get_household_context)):
    """
    Get household details.

    - Returns 403 if the user is not a member
    """
    return context.household


@router.get("/{household_id}/members", response_model=list[HouseholdMemberResponse])
async def list_members(
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """List all members of the household with their roles"""
    service = HouseholdService(db)
    return service.get_members(context)


@router.patch("/{household_id}/members/{user_id}", response_model=HouseholdMemberResponse)
async def update_member_role(
    user_id: int,
    role_update: HouseholdRoleUpdate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Update member's role.

    - **Requires ADMIN permissions**
    - Cannot change your own role
    """
    service = HouseholdService(db)
    membership = service.update_member_role(user_id, role_update, context)
    return service.member_details(membership)
