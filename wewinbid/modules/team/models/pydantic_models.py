from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from wewinbid.modules.auth.db.schema import UserRoleEnum
from wewinbid.modules.auth.models.pydantic_models import UserResponse
from wewinbid.modules.team.db.schema import InvitationStatusEnum


class InvitationCreate(BaseModel):
    email: EmailStr
    role: UserRoleEnum = UserRoleEnum.MEMBER

    @field_validator("role")
    @classmethod
    def role_not_owner(cls, value: UserRoleEnum) -> UserRoleEnum:
        if value == UserRoleEnum.OWNER:
            raise ValueError("Invitations can only grant the ADMIN or MEMBER role")
        return value


class InvitationResponse(BaseModel):
    id: UUID
    email: str
    role: UserRoleEnum
    status: InvitationStatusEnum
    invited_by: Optional[UUID] = None
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class InvitationAccept(BaseModel):
    token: str = Field(..., min_length=10)
    full_name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)


class MemberRoleUpdate(BaseModel):
    role: UserRoleEnum


class MemberResponse(UserResponse):
    pass
