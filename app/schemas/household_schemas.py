from pydantic import BaseModel, Field
from datetime import datetime
from app.models.role import HouseholdRole


class HouseholdCreate(BaseModel):
    """Create a household (creator becomes ADMIN)"""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)


class HouseholdResponse(BaseModel):
    """Household details response"""

    id: int
    name: str
    description: str | None
    invite_code: str
    created_by: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserHouseholdResponse(BaseModel):
    """Household the user belongs to, with the user's role in it"""

    id: int
    name: str
    description: str | None
    role: HouseholdRole
    member_count: int
    created_at: datetime


class HouseholdJoinRequest(BaseModel):
    """Join a household with its invite code"""

    invite_code: str = Field(..., min_length=1, max_length=32)


class HouseholdMemberResponse(BaseModel):
    """Household member details with user info"""

    id: int
    user_id: int
    auth_user_id: str
    display_name: str | None
    role: HouseholdRole
    joined_at: datetime


class HouseholdRoleUpdate(BaseModel):
    """Update member's role (ADMIN only)"""

    role: HouseholdRole = Field(..., description="New role to assign")
