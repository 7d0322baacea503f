"""
Team management: invitations (with the plan's collaborator quota), acceptance
and member roles.
"""
import logging
import secrets
import uuid
from datetime import timedelta
from typing import List

from sqlalchemy.orm import Session

from wewinbid.core.errors import ConflictError, GoneError, NotFoundError, PermissionDeniedError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.core.security import hash_password
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.notifications.services.email_service import send_notification_email
from wewinbid.modules.subscription.services.subscription_service import SubscriptionService
from wewinbid.modules.team.db.schema import InvitationStatusEnum, TeamInvitation
from wewinbid.modules.team.models.pydantic_models import InvitationAccept, InvitationCreate

logger = logging.getLogger(__name__)

INVITATION_TTL = timedelta(days=7)


class TeamService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def list_members(self, user: User) -> List[User]:
        return self.users.list_company_users(user.company_id)

    def list_invitations(self, user: User) -> List[TeamInvitation]:
        return (
            self.db.query(TeamInvitation)
            .filter(TeamInvitation.company_id == user.company_id)
            .order_by(TeamInvitation.created_at.desc())
            .all()
        )

    def invite(self, inviter: User, request: InvitationCreate) -> TeamInvitation:
        email = request.email.lower()
        if self.users.get_by_email(email):
            raise ConflictError("A user with this email already exists")

        pending = (
            self.db.query(TeamInvitation)
            .filter(
                TeamInvitation.company_id == inviter.company_id,
                TeamInvitation.email == email,
                TeamInvitation.status == InvitationStatusEnum.pending,
                TeamInvitation.expires_at > utcnow(),
            )
            .first()
        )
        if pending:
            raise ConflictError("An invitation is already pending for this email")

        company = self.db.get(Company, inviter.company_id)
        SubscriptionService(self.db).ensure_can_add_collaborator(company)

        invitation = TeamInvitation(
            company_id=inviter.company_id,
            email=email,
            role=request.role,
            token=secrets.token_urlsafe(32),
            invited_by=inviter.id,
            status=InvitationStatusEnum.pending,
            expires_at=utcnow() + INVITATION_TTL,
        )
        self.db.add(invitation)
        self.db.commit()
        self.db.refresh(invitation)

        send_notification_email(
            email,
            f"Invitation à rejoindre {company.name} sur WeWinBid",
            f"{inviter.full_name or inviter.email} vous invite à rejoindre l'équipe {company.name}. "
            f"Cette invitation expire dans {INVITATION_TTL.days} jours.",
            f"/invitations/accept?token={invitation.token}",
        )
        logger.info(f"Invitation {invitation.id} sent to {email} for company {company.id}")
        return invitation

    def revoke(self, user: User, invitation_id: uuid.UUID) -> TeamInvitation:
        invitation = (
            self.db.query(TeamInvitation)
            .filter(TeamInvitation.id == invitation_id, TeamInvitation.company_id == user.company_id)
            .first()
        )
        if not invitation:
            raise NotFoundError("Invitation not found")
        if invitation.status != InvitationStatusEnum.pending:
            raise ValidationError(f"Invitation is already {invitation.status.value}")
        invitation.status = InvitationStatusEnum.revoked
        self.db.commit()
        self.db.refresh(invitation)
        return invitation

    def accept(self, request: InvitationAccept) -> User:
        invitation = self.db.query(TeamInvitation).filter(TeamInvitation.token == request.token).first()
        if not invitation:
            raise NotFoundError("Invitation not found")
        if invitation.status == InvitationStatusEnum.pending and invitation.expires_at <= utcnow():
            invitation.status = InvitationStatusEnum.expired
            self.db.commit()
        if invitation.status != InvitationStatusEnum.pending:
            raise GoneError(f"Invitation is {invitation.status.value}")
        if self.users.get_by_email(invitation.email):
            raise ConflictError("A user with this email already exists")

        user = User(
            email=invitation.email,
            hashed_password=hash_password(request.password),
            full_name=request.full_name,
            role=invitation.role,
            company_id=invitation.company_id,
        )
        self.db.add(user)
        invitation.status = InvitationStatusEnum.accepted
        invitation.accepted_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Invitation {invitation.id} accepted, user {user.id} joined company {user.company_id}")
        return user

    def update_role(self, owner: User, member_id: uuid.UUID, role: UserRoleEnum) -> User:
        if owner.role != UserRoleEnum.OWNER:
            raise PermissionDeniedError("Only the company owner can change roles")
        member = self.users.get_company_user(owner.company_id, member_id)
        if not member:
            raise NotFoundError("Member not found")
        if member.id == owner.id:
            raise ValidationError("You cannot change your own role")

        if role == UserRoleEnum.OWNER:
            # Ownership transfer: the previous owner stays on as admin
            owner.role = UserRoleEnum.ADMIN
            logger.info(f"Ownership of company {owner.company_id} transferred from {owner.id} to {member.id}")
        member.role = role
        self.db.commit()
        self.db.refresh(member)
        return member

    def remove_member(self, admin: User, member_id: uuid.UUID) -> None:
        if member_id == admin.id:
            raise ValidationError("You cannot remove yourself from the team")
        member = self.users.get_company_user(admin.company_id, member_id)
        if not member:
            raise NotFoundError("Member not found")
        if member.role == UserRoleEnum.OWNER:
            raise PermissionDeniedError("The company owner cannot be removed")
        self.db.delete(member)
        self.db.commit()
        logger.info(f"User {member_id} removed from company {admin.company_id} by {admin.id}")
