"""
Authentication: registration, login and the current-user dependencies.
"""
import logging
import uuid

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from wewinbid.core.errors import AuthenticationError, ConflictError, PermissionDeniedError, ValidationError
from wewinbid.core.security import create_access_token, decode_access_token, hash_password, verify_password
from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.auth.models.pydantic_models import RegisterRequest, UserUpdateRequest
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.companies.db.schema import Company, SubscriptionPlanEnum

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def register(self, request: RegisterRequest) -> User:
        if self.users.get_by_email(request.email):
            raise ConflictError("An account with this email already exists")

        company = Company(
            name=request.company_name,
            country=request.country.upper(),
            email=request.email,
            subscription_plan=SubscriptionPlanEnum.FREE,
            subscription_status="active",
        )
        self.db.add(company)
        self.db.flush()

        user = User(
            email=request.email.lower(),
            hashed_password=hash_password(request.password),
            full_name=request.full_name,
            role=UserRoleEnum.OWNER,
            company_id=company.id,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered user {user.id} with company {company.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise PermissionDeniedError("This account has been deactivated")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id)

    def update_profile(self, user: User, request: UserUpdateRequest) -> User:
        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect")
        user.hashed_password = hash_password(new_password)
        self.db.commit()
        logger.info(f"Password changed for user {user.id}")


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db_session),
) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(payload.get("sub", ""))
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except (jwt.PyJWTError, ValueError):
        raise AuthenticationError("Invalid token")

    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise PermissionDeniedError("This account has been deactivated")
    return current_user


def require_company_admin(current_user: User = Depends(get_current_active_user)) -> User:
    if not current_user.is_company_admin:
        raise PermissionDeniedError("Only company owners and admins can perform this action")
    return current_user
