from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from loguru import logger

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import InvalidCredentials
from ..core.security import (
    AUTH_COOKIE_NAME,
    TRAINER_COOKIE_NAME,
    issue_token,
    set_session_cookie,
    verify_password,
)
from ..models.orm import AdminUser
from ..models.token import SUPER_ADMIN, TokenPayload
from ..models.user import CurrentUserResponse, LoginCredentials, LoginResponse, UserResponse

router = APIRouter(prefix="/api/auth", tags=["authentication"])


def user_response(identity: TokenPayload) -> UserResponse:
    return UserResponse(
        id=identity.user_id,
        email=identity.email,
        role=identity.role,
        name=identity.name
    )


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginCredentials, response: Response, db: Session = Depends(get_db)):
    """
    Super-admin login; sets the auth-token session cookie
    """
    admin = db.query(AdminUser).filter(AdminUser.email == credentials.email).first()

    if not admin or admin.role != SUPER_ADMIN or not verify_password(credentials.password, admin.password_hash):
        logger.warning(f"Failed admin login attempt for: {credentials.email}")
        raise InvalidCredentials()

    identity = TokenPayload(user_id=admin.id, email=admin.email, role=SUPER_ADMIN, name=admin.name)
    token = issue_token(identity)
    set_session_cookie(response, AUTH_COOKIE_NAME, token)

    logger.info(f"Admin logged in: {admin.email}")

    return LoginResponse(user=user_response(identity), token=token)


@router.post("/logout")
async def logout(response: Response):
    """
    Clear session cookies. Tokens themselves stay valid until they expire.
    """
    response.delete_cookie(AUTH_COOKIE_NAME)
    response.delete_cookie(TRAINER_COOKIE_NAME)
    return {"success": True}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(current_user: TokenPayload = Depends(get_current_user)):
    """
    Get information about the currently logged in user
    """
    return CurrentUserResponse(user=user_response(current_user))
