"""
Image upload endpoint used by the event submission form.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from marketplace.core.security import require_organizer
from marketplace.schemas.common import ApiModel
from marketplace.services.upload_service import store_image

router = APIRouter(prefix="/upload", tags=["Uploads"])


class UploadResponse(ApiModel):
    success: bool = True
    url: str


@router.post("/image", response_model=UploadResponse, dependencies=[Depends(require_organizer)])
async def upload_image(image: UploadFile = File(...)):
    url = await store_image(image)
    return UploadResponse(url=url)
