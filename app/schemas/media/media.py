# app/schemas/media/media.py
from pydantic import BaseModel


class UploadedImageData(BaseModel):
    base64: str
    filename: str
    content_type: str
    size: int
    original_size: int
    compressed: bool
    size_display: str
    original_size_display: str


class UploadedImageResponse(BaseModel):
    status_code: int
    message: str
    data: UploadedImageData
