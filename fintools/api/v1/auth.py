from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fintools.core.config import settings
from fintools.core.dependencies import get_db, get_current_active_user
from fintools.core.security import create_access_token
from fintools.logger_config import logger
from fintools.models.user import User
from fintools.schemas.auth import (
    ContributionUpdate,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from fintools.schemas.common import ApiResponse
from fintools.services.user_service import authenticate_user, create_user, update_fund_contribution

router = APIRouter()


def _issue_token(user: User) -> str:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return create_access_token(
        data={"sub": user.email, "user_id": user.user_id, "role": user.role.value},
        expires_delta=access_token_expires,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    register_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user. New users are founders.
    """
    try:
        user = create_user(
            db=db,
            email=register_data.email,
            password=register_data.password,
            name=register_data.name,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"User {user.email} registered successfully")
    return TokenResponse(token=_issue_token(user))


@router.post("/login", response_model=TokenResponse)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Login endpoint - Authenticate user and return JWT token.
    """
    logger.info(f"Login attempt for email: {login_data.email}")

    user = authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    logger.info(f"User {user.email} logged in successfully")
    return TokenResponse(token=_issue_token(user))


@router.get("/me", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
def get_me(current_user: User = Depends(get_current_active_user)):
    """
    Get current authenticated user's information.
    """
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.put("/update-contribution/{user_id}", response_model=ApiResponse[UserResponse],
            response_model_exclude_none=True)
def update_contribution(
    user_id: int,
    payload: ContributionUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Update a founder's fund contribution. Admins may update anyone.
    """
    user = update_fund_contribution(db, current_user, user_id, payload.fund_contribution)
    return ApiResponse(data=UserResponse.model_validate(user))
