"""User API routes."""

from fastapi import APIRouter, Depends, status

from manager.auth import get_container, get_current_user
from manager.schemas.auth import RegisterRequest, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, container=Depends(get_container)):
    """
    Register a new user account.

    Parameters:
        - email: Unique email
        - password: User password (hashed before storage)

    Raises:
        - 400: Missing email, missing password, or email already registered
    """
    user = container.auth_service.register_user(request.email, request.password)
    return UserResponse(id=user.user_id, email=user.email)


@router.get("/me", response_model=UserResponse)
async def me(
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """
    Return the user behind the X-Token header.

    Raises:
        - 401: Missing, unknown or expired token
    """
    user = container.auth_service.get_user(current_user)
    return UserResponse(id=user.user_id, email=user.email)
