"""Path-based authorization gate run before every route handler.

Rules, first match wins for the public list:

1. public prefixes: allow without looking at credentials
2. admin UI (except its login page): valid ``super_admin`` token or redirect
   to the admin login page
3. trainer UI (except its login page): a trainer token must be *present*
   (bearer header or trainer cookie); it is not verified here
4. admin-only API prefixes: valid ``super_admin`` token or 401 JSON
5. anything else: allow

Prefixes match whole path segments, so ``/admin`` covers ``/admin/members``
but not ``/administrator``, and ``/`` covers only the root page.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger
from starlette.requests import HTTPConnection

from .security import TRAINER_COOKIE_NAME, authenticate_request, get_token_from_request
from ..models.token import SUPER_ADMIN

PUBLIC_PREFIXES = (
    "/",
    "/trainers",
    "/astrology",
    "/ai-planner",
    "/api/auth/login",
    "/api/trainers/auth",
    "/api/upload",
)

ADMIN_API_PREFIXES = (
    "/api/admin/stats",
    "/api/admin/notifications",
)


@dataclass(frozen=True)
class RoutePolicy:
    public_prefixes: Tuple[str, ...] = PUBLIC_PREFIXES
    admin_prefix: str = "/admin"
    admin_login_path: str = "/admin/login"
    trainer_prefix: str = "/trainer"
    trainer_login_path: str = "/trainer/login"
    trainer_cookie_name: str = TRAINER_COOKIE_NAME
    admin_api_prefixes: Tuple[str, ...] = ADMIN_API_PREFIXES


class GateAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    location: Optional[str] = None
    reason: Optional[str] = None


ALLOW = GateDecision(GateAction.ALLOW)


def path_matches(path: str, prefix: str) -> bool:
    """True when ``path`` is ``prefix`` or lies underneath it"""
    prefix = prefix.rstrip("/")
    if not prefix:
        return path == "/"
    return path == prefix or path.startswith(prefix + "/")


def is_login_page(path: str, login_path: str) -> bool:
    return path.rstrip("/") == login_path.rstrip("/")


def _is_super_admin(request: HTTPConnection) -> bool:
    user = authenticate_request(request)
    return user is not None and user.role == SUPER_ADMIN


def evaluate_request(request: HTTPConnection, policy: RoutePolicy) -> GateDecision:
    """Decide whether a request may reach its handler"""
    path = request.url.path

    if any(path_matches(path, prefix) for prefix in policy.public_prefixes):
        return ALLOW

    if path_matches(path, policy.admin_prefix) and not is_login_page(path, policy.admin_login_path):
        if not _is_super_admin(request):
            return GateDecision(GateAction.REDIRECT, policy.admin_login_path, "super_admin required")

    # Presence only: the trainer API endpoints verify the token themselves.
    if path_matches(path, policy.trainer_prefix) and not is_login_page(path, policy.trainer_login_path):
        if not get_token_from_request(request, policy.trainer_cookie_name):
            return GateDecision(GateAction.REDIRECT, policy.trainer_login_path, "trainer token missing")

    if any(path_matches(path, prefix) for prefix in policy.admin_api_prefixes):
        if not _is_super_admin(request):
            return GateDecision(GateAction.REJECT, reason="super_admin required")

    return ALLOW


def setup_authorization_gate(app: FastAPI, policy: Optional[RoutePolicy] = None):
    """Register the gate as an HTTP middleware on ``app``"""
    policy = policy or RoutePolicy()

    @app.middleware("http")
    async def authorization_gate(request: Request, call_next):
        decision = evaluate_request(request, policy)

        if decision.action is GateAction.REDIRECT:
            logger.bind(path=request.url.path, reason=decision.reason).info(
                f"Gate redirect: {request.url.path} -> {decision.location}"
            )
            target = request.url.replace(path=decision.location, query="", fragment="")
            return RedirectResponse(str(target), status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        if decision.action is GateAction.REJECT:
            logger.bind(path=request.url.path, reason=decision.reason).warning(
                f"Gate rejected: {request.method} {request.url.path}"
            )
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Unauthorized"}
            )

        return await call_next(request)

    return policy
