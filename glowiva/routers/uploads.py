from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse

from glowiva.core.auth import Principal, get_current_user
from glowiva.core.config import Settings, get_settings
from glowiva.core.rate_limiter import limiter
from glowiva.schemas.upload import ImageUpload, ImageUploadResponse
from glowiva.services.uploads import resolve_upload, store_image

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post("/image", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
def upload_image(
    request: Request,
    upload: ImageUpload,
    settings: Settings = Depends(get_settings),
    current_user: Principal = Depends(get_current_user),
):
    filename = store_image(
        settings.UPLOAD_DIR,
        upload.image_data,
        upload.file_name,
        settings.MAX_UPLOAD_BYTES,
    )

    return {
        "message": "Image uploaded successfully",
        "image_url": f"/api/uploads/{filename}",
        "file_name": filename,
    }


@router.get("/{filename}")
def get_image(filename: str, settings: Settings = Depends(get_settings)):
    return FileResponse(resolve_upload(settings.UPLOAD_DIR, filename))
