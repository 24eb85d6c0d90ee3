"""Account routes (register, login, password reset)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_client_url, get_mailer, get_user_repo
from api.models import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from api.security import get_current_user_required
from domain.model.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    UserNotFoundError,
    ValidationError,
)
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Returns:
        Session token, welcome message and public user info

    Raises:
        HTTPException: 400 if the email is taken or the password is rejected
    """
    try:
        user = auth_service.register(
            repo,
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AuthResponse(
        token=create_access_token(user.id),
        message="Registration successful. Welcome!",
        user=UserResponse.from_domain(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Login user and return a session token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    try:
        user = auth_service.authenticate(repo, request.email, request.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return AuthResponse(
        token=create_access_token(user.id),
        message="Login successful. Welcome back!",
        user=UserResponse.from_domain(user),
    )


@router.get("/reset-password/{token}", response_model=MessageResponse)
async def check_reset_token(token: str, repo: UserRepository = Depends(get_user_repo)):
    """Tell the client whether a reset link is still usable. Does not consume it."""
    if not auth_service.validate_reset_token(repo, token):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")
    return MessageResponse(message="valid")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    repo: UserRepository = Depends(get_user_repo),
    mailer: MailerPort = Depends(get_mailer),
    client_url: str = Depends(get_client_url),
):
    """Email a password reset link.

    Raises:
        HTTPException: 404 if no account uses this email
    """
    try:
        await auth_service.request_password_reset(repo, mailer, request.email, client_url)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return MessageResponse(message="Password reset instructions sent by email.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, repo: UserRepository = Depends(get_user_repo)):
    """Set a new password using a reset token (single use)."""
    try:
        auth_service.reset_password(repo, request.reset_token, request.new_password)
    except InvalidOrExpiredTokenError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MessageResponse(message="Password reset successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return current_user
