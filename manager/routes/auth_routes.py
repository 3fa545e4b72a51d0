"""Session API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from manager.auth import get_container
from manager.schemas.auth import ConnectResponse

router = APIRouter(tags=["Authentication"])


@router.get("/connect", response_model=ConnectResponse)
async def connect(
    authorization: Optional[str] = Header(None),
    container=Depends(get_container),
):
    """
    Authenticate with Basic credentials and open a session.

    Parameters:
        - Authorization header: Basic base64(email:password)

    Returns:
        - token: Session token, valid for 24 hours

    Raises:
        - 401: Missing or invalid credentials
        - 503: Session store unavailable
    """
    token = await container.auth_service.connect(authorization)
    return ConnectResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(None),
    container=Depends(get_container),
):
    """
    Close the session identified by the X-Token header.

    Raises:
        - 401: Unknown, expired or already revoked token
        - 503: Session store unavailable
    """
    await container.auth_service.disconnect(x_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
