import uuid
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.core.dependencies import get_user_service, get_current_user, require_admin
from app.services.user import UserService
from app.db.schema import User
from app.models.user import (
    Token, TokenAccess, TokenRefresh, UserSignin, UserRead, UserCreate
)


router = APIRouter()


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=UserRead,
    summary="Register a new customer",
    description="Creates a customer account. Administrators are provisioned by the seed script."
)
def signup(
    user_in: UserCreate,
    service: UserService = Depends(get_user_service)
):
    try:
        return service.create_user(user_in)

    except ValueError as e:
        logger.warning(f"Signup validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception:
        logger.exception("Unexpected error during signup")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request."
        )


@router.post(
    "/token",
    response_model=Token,
    status_code=status.HTTP_200_OK,
    summary="Signin to get tokens",
    description="Returns an Access Token (short-lived) and Refresh Token (long-lived)."
)
def login(
    signin_data: UserSignin,
    service: UserService = Depends(get_user_service)
):
    """
    1. Verifies password.
    2. Checks if user is Active.
    3. Issues JWTs.
    """
    user = service.authenticate_user(signin_data.email, signin_data.password)

    if not user:
        # Generic error to prevent user enumeration
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated. Please contact support."
        )

    tokens = service.generate_tokens(user)

    logger.info(f"User logged in: {user.id}")

    return tokens


@router.post(
    "/refresh",
    response_model=TokenAccess,
    status_code=status.HTTP_200_OK,
    summary="Refresh Session",
    description="Exchanges a valid Refresh Token for a new Access Token."
)
def refresh_token(
    refresh_data: TokenRefresh,
    service: UserService = Depends(get_user_service)
):
    # The service raises 401 if the token or user is invalid
    new_access_token = service.refresh_session(refresh_data.refresh_token)

    return TokenAccess(access_token=new_access_token)


@router.get(
    "/me",
    response_model=UserRead,
    status_code=status.HTTP_200_OK,
    summary="Get current user"
)
def get_me(
    current_user: User = Depends(get_current_user)
):
    return current_user


@router.get(
    "/",
    response_model=List[UserRead],
    summary="List Users",
    description="All accounts, newest first. (Admin only)"
)
def list_users(
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    return service.list_users()


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    description="(Admin only)"
)
def get_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    return service.get_user(user_id)
