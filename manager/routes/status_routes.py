"""Service status API routes."""

from fastapi import APIRouter, Depends

from manager.auth import get_container
from manager.schemas.common import StatsResponse, StatusResponse

router = APIRouter(tags=["Status"])


@router.get("/status", response_model=StatusResponse)
async def get_status(container=Depends(get_container)):
    """Report whether Redis and the metadata database are reachable."""
    return StatusResponse(
        redis=await container.sessions.ping(),
        db=container.database.ping(),
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(container=Depends(get_container)):
    """Count users and files."""
    return StatsResponse(
        users=container.user_repo.count(),
        files=container.file_repo.count(),
    )
