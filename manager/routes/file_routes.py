"""File operation API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status

from common.utils import parse_page
from manager.auth import get_container, get_current_user
from manager.schemas.files import FileResponse, UploadRequest

router = APIRouter(prefix="/files", tags=["Files"])


@router.post(
    "",
    response_model=FileResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def upload_file(
    request: UploadRequest,
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """
    Create a folder, or upload a file or image.

    Parameters:
        - name: File name (required)
        - type: folder, file or image (required)
        - parentId: Parent folder id, "0" for root (optional)
        - isPublic: Visibility (optional, default false)
        - data: Base64 content (required unless type is folder)
        - X-Token header (required)

    Raises:
        - 400: Missing name/type/data, invalid type, invalid parent
        - 401: Invalid or missing token
        - 503: Backend unavailable
    """
    result = await container.file_service.upload(
        owner_id=current_user,
        name=request.name,
        file_type=request.type,
        parent_id=request.parentId,
        is_public=request.isPublic,
        data=request.data,
    )
    return FileResponse.from_record(result.record, result.thumbnails_queued)


@router.get("", response_model=List[FileResponse], response_model_exclude_none=True)
async def list_files(
    parentId: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """
    List one page (20 entries) of the current user's files under a parent.

    Raises:
        - 401: Invalid or missing token
    """
    records = container.file_service.list_files(current_user, parentId, parse_page(page))
    return [FileResponse.from_record(record) for record in records]


@router.get("/{file_id}", response_model=FileResponse, response_model_exclude_none=True)
async def show_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """
    Return the metadata of one of the current user's files.

    Raises:
        - 401: Invalid or missing token
        - 404: No such file for this user
    """
    record = container.file_service.get_file(current_user, file_id)
    return FileResponse.from_record(record)


@router.put("/{file_id}/publish", response_model=FileResponse, response_model_exclude_none=True)
async def publish_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """Make a file public. Only the owner may do this."""
    record = container.file_service.set_visibility(current_user, file_id, True)
    return FileResponse.from_record(record)


@router.put("/{file_id}/unpublish", response_model=FileResponse, response_model_exclude_none=True)
async def unpublish_file(
    file_id: str,
    current_user: str = Depends(get_current_user),
    container=Depends(get_container),
):
    """Make a file private. Only the owner may do this."""
    record = container.file_service.set_visibility(current_user, file_id, False)
    return FileResponse.from_record(record)


@router.get("/{file_id}/data")
async def get_file_data(
    file_id: str,
    size: Optional[str] = Query(None),
    x_token: Optional[str] = Header(None),
    container=Depends(get_container),
):
    """
    Return the raw content of a file, or one of its thumbnails.

    Parameters:
        - size: small, medium or large (optional)
        - X-Token header (optional; public files are readable anonymously)

    Raises:
        - 400: Folder has no content, or invalid size
        - 404: Missing file, private file of another user, or thumbnail not generated yet
        - 503: Backend unavailable
    """
    content = await container.file_service.read(file_id, token=x_token, size=size)
    return Response(content=content.data, media_type=content.mime_type)
