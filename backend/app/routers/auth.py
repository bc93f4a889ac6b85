"""
Authentication router for local accounts, Google OAuth and JWT issuance.

Provides endpoints for:
- Registering and logging in with email and password
- Retrieving and updating the current user's profile
- Changing the password
- Signing in with Google
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    PasswordUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserDetailsUpdate,
    UserResponse,
)
from app.schemas.common import DataResponse
from app.services.auth_service import (
    authenticate_user,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from app.services.google_service import GoogleOAuthError, google_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def _email_taken(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Create a local account and return a token for it.

    Raises:
        HTTPException: 400 if the email is already registered
    """
    email = body.email.lower()
    if _email_taken(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        name=body.name.strip(),
        email=email,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return TokenResponse(token=create_access_token(user_id=user.id))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with email and password",
)
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Exchange credentials for a token.

    Raises:
        HTTPException: 401 if the email is unknown or the password is wrong
    """
    user = authenticate_user(db, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info(f"User {user.id} logged in")
    return TokenResponse(token=create_access_token(user_id=user.id))


@router.get(
    "/me",
    response_model=DataResponse[UserResponse],
    summary="Get current user",
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> DataResponse[UserResponse]:
    """Return the authenticated user's profile."""
    return DataResponse(data=UserResponse.model_validate(current_user))


@router.put(
    "/updatedetails",
    response_model=DataResponse[UserResponse],
    summary="Update profile details",
)
async def update_details(
    body: UserDetailsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DataResponse[UserResponse]:
    """
    Update the current user's profile.

    Only fields present in the body are changed. Preferences are merged
    key by key.

    Raises:
        HTTPException: 400 if the new email belongs to another account
    """
    update_data = body.model_dump(exclude_unset=True)

    if "email" in update_data and update_data["email"] is not None:
        email = update_data["email"].lower()
        if _email_taken(db, email, exclude_user_id=current_user.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )
        current_user.email = email

    for field in ("name", "bio", "avatar"):
        if field in update_data and update_data[field] is not None:
            setattr(current_user, field, update_data[field])

    preferences = update_data.get("preferences") or {}
    for field, value in preferences.items():
        if value is not None:
            setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    logger.info(f"Updated details of user {current_user.id}")
    return DataResponse(data=UserResponse.model_validate(current_user))


@router.put(
    "/updatepassword",
    response_model=TokenResponse,
    summary="Change password",
)
async def update_password(
    body: PasswordUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Change the password and issue a fresh token.

    Raises:
        HTTPException: 401 if the current password is wrong
    """
    if not verify_password(body.current_password, current_user.password_hash):
        logger.warning(f"Wrong current password for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Password is incorrect",
        )

    current_user.password_hash = hash_password(body.new_password)
    db.commit()

    logger.info(f"Password changed for user {current_user.id}")
    return TokenResponse(token=create_access_token(user_id=current_user.id))


@router.get(
    "/google",
    response_class=RedirectResponse,
    summary="Sign in with Google",
    description="Redirects to the Google consent screen.",
)
async def google_login() -> RedirectResponse:
    """
    Redirect to Google OAuth.

    Raises:
        HTTPException: 503 if Google OAuth is not configured
    """
    if not settings.google_oauth_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured",
        )

    authorization_url = google_service.get_authorization_url(
        redirect_uri=settings.GOOGLE_REDIRECT_URI
    )
    return RedirectResponse(url=authorization_url, status_code=status.HTTP_302_FOUND)


def _find_or_create_google_user(db: Session, profile: dict) -> User:
    """
    Resolve the account for a Google profile.

    Looks up by Google subject first, then links an existing account with
    the same email, and otherwise creates a new passwordless account.
    Linking and creating both need an email Google has verified.
    """
    google_id = str(profile["sub"])
    email = (profile.get("email") or "").lower()

    user = db.query(User).filter(User.google_id == google_id).first()
    if user is not None:
        return user

    if not email:
        raise GoogleOAuthError("Google profile has no email address")

    # userinfo sends a boolean, tokeninfo the string "true"
    if profile.get("email_verified") not in (True, "true"):
        logger.warning(f"Rejected Google sign-in for subject {google_id} with unverified email")
        raise GoogleOAuthError("Google email address is not verified")

    user = db.query(User).filter(User.email == email).first()
    if user is not None:
        user.google_id = google_id
        if not user.avatar and profile.get("picture"):
            user.avatar = profile["picture"]
        db.commit()
        logger.info(f"Linked Google account to user {user.id}")
        return user

    user = User(
        name=profile.get("name") or email.split("@")[0],
        email=email,
        google_id=google_id,
        avatar=profile.get("picture"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} from Google sign-in")
    return user


@router.get(
    "/google/callback",
    response_class=RedirectResponse,
    summary="Handle Google OAuth callback",
    description="Exchanges the code, resolves the account and redirects to the frontend with a token.",
)
async def google_callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    error: Optional[str] = Query(None, description="Error code if authorization failed"),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """
    Handle the Google OAuth callback.

    Raises:
        HTTPException: 401 if Google denied access or the exchange failed
    """
    if error or not code:
        logger.warning(f"Google authorization failed: {error or 'missing code'}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Google authentication failed",
        )

    try:
        tokens = await google_service.exchange_code(code, redirect_uri=settings.GOOGLE_REDIRECT_URI)
        profile = await google_service.get_user_info(tokens["access_token"])
        user = _find_or_create_google_user(db, profile)
    except (GoogleOAuthError, KeyError) as e:
        logger.error(f"Google sign-in failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Google authentication failed",
        )

    token = create_access_token(user_id=user.id)
    redirect_url = f"{settings.FRONTEND_URL}/auth/google/callback?{urlencode({'token': token})}"
    return RedirectResponse(url=redirect_url, status_code=status.HTTP_302_FOUND)
