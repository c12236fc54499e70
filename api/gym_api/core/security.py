from datetime import datetime, timedelta, timezone
from typing import Optional
import os
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from loguru import logger
from passlib.context import CryptContext
from pydantic import ValidationError
from starlette.requests import HTTPConnection
from starlette.responses import Response

from ..models.token import TokenPayload

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7

# Session cookies
AUTH_COOKIE_NAME = "auth-token"
TRAINER_COOKIE_NAME = "trainer-token"

BEARER_PREFIX = "Bearer "

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

# Setup password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class MissingSecretKey(RuntimeError):
    """Raised when no signing key is configured"""


def get_secret_key() -> str:
    """Return the configured signing key, refusing to run without one"""
    secret_key = os.getenv("JWT_SECRET")
    if not secret_key:
        raise MissingSecretKey("JWT_SECRET is not set; refusing to sign or verify tokens")
    return secret_key


def get_password_hash(password: str) -> str:
    """Generate a hashed version of the password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify if the plain password matches the hashed password"""
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(
    payload: TokenPayload,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None
) -> str:
    """Sign an identity payload. Tokens expire after seven days by default."""
    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = payload.to_claims()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, secret_key or get_secret_key(), algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret_key: Optional[str] = None) -> Optional[TokenPayload]:
    """
    Decode and validate a token.

    Returns the identity payload, or None when the signature is wrong, the
    token has expired, or the claims do not form a valid payload. The reason
    is logged here and never handed to the caller.
    """
    try:
        claims = jwt.decode(
            token,
            secret_key or get_secret_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require_exp": True}
        )
    except ExpiredSignatureError:
        logger.warning("Token rejected: expired", reason="expired_token")
        return None
    except JWTError as e:
        logger.bind(reason="invalid_signature").warning(f"Token rejected: {e}")
        return None

    try:
        return TokenPayload.model_validate(claims)
    except ValidationError as e:
        logger.warning(
            "Token rejected: malformed payload",
            reason="malformed_payload",
            fields=[".".join(str(p) for p in err["loc"]) for err in e.errors()]
        )
        return None


def get_token_from_request(
    request: HTTPConnection,
    cookie_name: str = AUTH_COOKIE_NAME
) -> Optional[str]:
    """Bearer header first, then the named session cookie"""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        token = auth_header[len(BEARER_PREFIX):].strip()
        if token:
            return token

    return request.cookies.get(cookie_name) or None


def authenticate_request(
    request: HTTPConnection,
    cookie_name: str = AUTH_COOKIE_NAME
) -> Optional[TokenPayload]:
    """Resolve the verified identity behind a request, if any"""
    token = get_token_from_request(request, cookie_name)
    if not token:
        logger.debug("No credential on request", path=request.url.path)
        return None
    return verify_token(token)


def set_session_cookie(response: Response, cookie_name: str, token: str) -> None:
    """Attach a session token cookie that lives as long as the token"""
    response.set_cookie(
        key=cookie_name,
        value=token,
        max_age=ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE
    )
