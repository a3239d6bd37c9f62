"""Image upload endpoint (admin): multipart file + category, stored under UPLOAD_DIR."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from storefront.api.deps import AdminUser, AppSettings
from storefront.schemas.common import MessageResponse, SuccessResponse
from storefront.schemas.upload import UploadOut
from storefront.services import uploads

router = APIRouter()


@router.post("", response_model=SuccessResponse[UploadOut], status_code=status.HTTP_201_CREATED)
async def upload_image(
    _admin: AdminUser,
    settings: AppSettings,
    file: Annotated[UploadFile, File()],
    category: Annotated[str, Form(max_length=32)] = "products",
) -> SuccessResponse[UploadOut]:
    """
    Store an image and return its public URL (/uploads/<category>/<name>).

    - **file**: image whose MIME type is in ALLOWED_IMAGE_TYPES, at most UPLOAD_MAX_SIZE bytes
    - **category**: products, banners, categories, avatars or logos
    """
    # Read one byte past the cap so oversized files are rejected without buffering them whole.
    content = await file.read(settings.UPLOAD_MAX_SIZE + 1)
    stored = uploads.store_upload(
        settings,
        content=content,
        original_name=file.filename or "",
        content_type=file.content_type or "",
        category=category,
    )
    return SuccessResponse(message="File uploaded", data=stored)


@router.delete("", response_model=MessageResponse)
def delete_image(
    _admin: AdminUser,
    settings: AppSettings,
    file_url: Annotated[str, Query(alias="fileUrl", min_length=1, max_length=1024)],
) -> MessageResponse:
    """Delete an uploaded file by its public URL. Deleting a missing file succeeds."""
    if uploads.delete_upload(settings, file_url):
        return MessageResponse(message="File deleted")
    return MessageResponse(message="File does not exist")
