import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.models.pydantic_models import TokenResponse, UserResponse
from wewinbid.modules.auth.services.auth_service import AuthService, get_current_active_user, require_company_admin
from wewinbid.modules.team.models.pydantic_models import (
    InvitationAccept,
    InvitationCreate,
    InvitationResponse,
    MemberResponse,
    MemberRoleUpdate,
)
from wewinbid.modules.team.services.team_service import TeamService

router = APIRouter(prefix="/team", tags=["Team"])


@router.get("/members", response_model=List[MemberResponse])
def list_members(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TeamService(db).list_members(current_user)


@router.patch("/members/{user_id}", response_model=MemberResponse)
def update_member_role(
    user_id: uuid.UUID,
    request: MemberRoleUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TeamService(db).update_role(current_user, user_id, request.role)


@router.delete("/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    user_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    TeamService(db).remove_member(current_user, user_id)


@router.get("/invitations", response_model=List[InvitationResponse])
def list_invitations(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TeamService(db).list_invitations(current_user)


@router.post("/invitations", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
def create_invitation(
    request: InvitationCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    return TeamService(db).invite(current_user, request)


@router.delete("/invitations/{invitation_id}", response_model=InvitationResponse)
def revoke_invitation(
    invitation_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    return TeamService(db).revoke(current_user, invitation_id)


@router.post("/invitations/accept", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def accept_invitation(request: InvitationAccept, db: Session = Depends(get_db_session)):
    """Public endpoint: creates the invited account and signs it in."""
    user = TeamService(db).accept(request)
    token = AuthService(db).issue_token(user)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))
