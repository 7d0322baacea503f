import logging

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.models.pydantic_models import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from wewinbid.modules.auth.services.account_service import AccountService
from wewinbid.modules.auth.services.auth_service import AuthService, get_current_active_user, get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_response(service: AuthService, user: User) -> TokenResponse:
    return TokenResponse(access_token=service.issue_token(user), user=UserResponse.model_validate(user))


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db_session)):
    service = AuthService(db)
    user = service.register(request)
    return _token_response(service, user)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db_session)):
    service = AuthService(db)
    user = service.authenticate(request.email, request.password)
    return _token_response(service, user)


@router.post("/token", response_model=TokenResponse, include_in_schema=False)
def login_form(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db_session)):
    """OAuth2 password flow used by the interactive API docs."""
    service = AuthService(db)
    user = service.authenticate(form_data.username, form_data.password)
    return _token_response(service, user)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_me(
    request: UserUpdateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AuthService(db).update_profile(current_user, request)


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    request: PasswordChangeRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    AuthService(db).change_password(current_user, request.current_password, request.new_password)


@router.get("/me/export", summary="Export all personal data (GDPR)")
def export_me(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AccountService(db).export_user_data(current_user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    AccountService(db).delete_account(current_user)
