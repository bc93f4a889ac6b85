"""
JWT authentication service.

Handles password hashing, JWT token creation and verification, and
resolving the authenticated user for protected routes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from app.config import settings
from app.database import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

# Security scheme for Bearer token authentication
security = HTTPBearer(auto_error=False)


class AuthenticationError(Exception):
    """Exception raised when authentication fails."""
    pass


def hash_password(password: str) -> str:
    """Hash a plain-text password for storage."""
    return generate_password_hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a plain-text password against a stored hash.

    Accounts created through Google have no password hash and never match.
    """
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Look up a user by email and verify the password.

    Args:
        db: Database session
        email: Login email (compared case-insensitively)
        password: Plain-text password

    Returns:
        Optional[User]: The user when the credentials match, otherwise None
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        return None
    return user




def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user_id: Stored as the ``sub`` claim
        expires_delta: Lifetime of the token, JWT_ACCESS_TOKEN_EXPIRE_MINUTES by default

    Returns:
        str: HS256-signed JWT
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": str(user_id),
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }

    logger.debug(f"Issued access token for user {user_id}")
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> int:
    """
    Decode an access token and return the user ID it was issued for.

    Raises:
        AuthenticationError: If the signature or expiry check fails, the
            token is not an access token, or the subject is not a user ID
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        raise AuthenticationError(f"Invalid token: {str(e)}")

    if claims.get("type") != "access":
        raise AuthenticationError(f"Invalid token type: {claims.get('type')}")

    subject = claims.get("sub")
    if subject is None:
        raise AuthenticationError("Invalid token: missing subject")

    try:
        return int(subject)
    except ValueError:
        raise AuthenticationError("Invalid token: malformed subject")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency resolving the bearer token to a user.

    Raises:
        HTTPException: 401 when the header is missing, the token does not
            verify, or the user it names no longer exists

    Example:
        >>> @router.get("/me")
        ... async def get_me(current_user: User = Depends(get_current_user)):
        ...     return {"name": current_user.name}
    """
    not_authorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized to access this route",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise not_authorized

    try:
        user_id = verify_token(credentials.credentials)
    except AuthenticationError as e:
        logger.warning(f"Rejected bearer token: {str(e)}")
        raise not_authorized

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token names missing user {user_id}")
        raise not_authorized

    return user
