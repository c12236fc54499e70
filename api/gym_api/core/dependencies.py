from fastapi import Depends, Request
from loguru import logger

from .exceptions import MissingCredential, InsufficientRole
from .rate_limit import DailyRateLimiter
from .security import TRAINER_COOKIE_NAME, authenticate_request
from ..models.token import SUPER_ADMIN, TRAINER, TokenPayload


async def get_current_user(request: Request) -> TokenPayload:
    """
    Get the current authenticated identity from the request token
    """
    user = authenticate_request(request)
    if user is None:
        raise MissingCredential()
    return user


async def verify_admin_role(current_user: TokenPayload = Depends(get_current_user)) -> TokenPayload:
    """
    Verify that the current user has the super_admin role
    """
    if current_user.role != SUPER_ADMIN:
        logger.warning(f"User {current_user.email} attempted to access admin endpoint without admin role")
        raise InsufficientRole(SUPER_ADMIN)
    return current_user


async def get_current_trainer(request: Request) -> TokenPayload:
    """
    Resolve a trainer identity from the bearer header or the trainer session cookie
    """
    trainer = authenticate_request(request, cookie_name=TRAINER_COOKIE_NAME)
    if trainer is None:
        raise MissingCredential()
    if trainer.role != TRAINER:
        logger.warning(f"User {trainer.email} attempted to access trainer endpoint with role {trainer.role}")
        raise InsufficientRole(TRAINER)
    return trainer


def get_rate_limiter(request: Request) -> DailyRateLimiter:
    """The application-owned plan generation limiter"""
    return request.app.state.rate_limiter
