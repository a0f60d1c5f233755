from pydantic import BaseModel, Field


class ImageUpload(BaseModel):
    # data:image/<ext>;base64,<payload>
    image_data: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1, max_length=100)

    class Config:
        extra = "forbid"


class ImageUploadResponse(BaseModel):
    message: str
    image_url: str
    file_name: str
