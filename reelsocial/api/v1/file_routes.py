# =============================================================================
# REELSOCIAL BACKEND - FILE ROUTES
# =============================================================================
# File: api/v1/file_routes.py
# Description: Image upload and multipart post endpoints
# =============================================================================

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from pydantic import Field

from reelsocial.auth.dependencies import AppContextDep, AuthContextDep, PostServiceDep
from reelsocial.auth.schemas import BaseSchema
from reelsocial.content.schemas import PostCreate, PostUpdate, PostResponse
from reelsocial.core.exceptions import AppException


router = APIRouter(prefix="/api", tags=["Files"])


class UploadResponse(BaseSchema):
    message: str = "File uploaded successfully"
    file_name: str = Field(..., serialization_alias="fileName")
    url: str


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload an image",
)
async def upload_image(
    caller: AuthContextDep,
    context: AppContextDep,
    file: UploadFile = File(...),
) -> UploadResponse:
    """JPEG or PNG up to 5 MB. The stored name is served under ``/images``."""
    stored_name = await context.storage.save(file)
    return UploadResponse(file_name=stored_name, url=f"/images/{stored_name}")


@router.post(
    "/post",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post with an image",
)
async def create_post_with_image(
    caller: AuthContextDep,
    context: AppContextDep,
    post_service: PostServiceDep,
    content: str = Form(..., min_length=1),
    title: Optional[str] = Form(None),
    file: UploadFile = File(...),
) -> PostResponse:
    """The post also carries the caller's current profile picture."""
    data = PostCreate(title=title, content=content)
    stored_name = await context.storage.save(file)
    try:
        return await post_service.create_post(caller, data, image_url=stored_name)
    except AppException:
        context.storage.discard(stored_name)
        raise


@router.put(
    "/updatePost/{post_id}",
    response_model=PostResponse,
    summary="Edit a post, optionally replacing its image",
)
async def update_post_with_image(
    post_id: str,
    caller: AuthContextDep,
    context: AppContextDep,
    post_service: PostServiceDep,
    content: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
) -> PostResponse:
    data = PostUpdate(title=title, content=content or None)
    stored_name = None
    if file is not None and file.filename:
        stored_name = await context.storage.save(file)
    try:
        return await post_service.update_post(caller, post_id, data, image_url=stored_name)
    except AppException:
        if stored_name is not None:
            context.storage.discard(stored_name)
        raise
