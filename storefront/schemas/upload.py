"""Request/response schemas for the image upload endpoint."""

from pydantic import Field

from storefront.schemas.common import CamelModel


class UploadOut(CamelModel):
    """Stored file as returned after a successful upload."""

    url: str = Field(..., description="Public path under /uploads")
    file_name: str
    size: int = Field(..., ge=0, description="Size in bytes")
    type: str = Field(..., description="MIME type")
    category: str
