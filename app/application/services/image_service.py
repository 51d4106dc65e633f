import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any
from fastapi import HTTPException

from ...exceptions import DecodeError, EncodeError
from ...media_utils import (
    CompressionOptions,
    SourceImage,
    compress_image,
    file_to_data_url,
    format_file_size,
    should_compress,
)

logger = logging.getLogger(__name__)


@dataclass
class ImageUploadService:
    """Turns an uploaded image into the inline data URL stored on a blog post."""

    max_size_bytes: int = 1024 * 1024
    max_original_size_bytes: int = 10 * 1024 * 1024
    accepted_types: List[str] = field(default_factory=lambda: ["image/jpeg", "image/png", "image/gif", "image/webp"])
    max_width: int = 1200
    max_height: int = 800
    quality: float = 0.8

    def validate(self, file: SourceImage) -> None:
        if file.size > self.max_original_size_bytes:
            limit_mb = round(self.max_original_size_bytes / (1024 * 1024))
            raise HTTPException(status_code=413, detail=f"Original file size must be less than {limit_mb}MB")
        if file.content_type not in self.accepted_types:
            allowed = ", ".join(t.split("/")[1] for t in self.accepted_types)
            raise HTTPException(status_code=415, detail=f"File type must be one of: {allowed}")

    async def prepare(self, file: SourceImage) -> Dict[str, Any]:
        self.validate(file)

        if should_compress(file, self.max_size_bytes):
            options = CompressionOptions(
                max_width=self.max_width,
                max_height=self.max_height,
                quality=self.quality,
                max_size_bytes=self.max_size_bytes,
            )
            try:
                compressed = await compress_image(file, options)
            except DecodeError:
                logger.warning(f"Could not decode uploaded image {file.filename}")
                raise HTTPException(status_code=400, detail="Failed to process the image file")
            except EncodeError:
                logger.exception(f"Compression failed for {file.filename}")
                raise HTTPException(status_code=500, detail="Failed to compress image. Please try a smaller image.")
            data = {
                "base64": compressed.base64,
                "filename": compressed.filename,
                "content_type": compressed.content_type,
                "size": compressed.size,
                "compressed": True,
            }
        else:
            data = {
                "base64": file_to_data_url(file),
                "filename": file.filename,
                "content_type": file.content_type,
                "size": file.size,
                "compressed": False,
            }

        if data["size"] > self.max_size_bytes:
            raise HTTPException(status_code=413, detail="Compressed image is still too large. Please try a smaller image.")

        data["original_size"] = file.size
        data["size_display"] = format_file_size(data["size"])
        data["original_size_display"] = format_file_size(file.size)
        logger.info(
            f"Prepared image {file.filename}: {data['original_size_display']} -> {data['size_display']}"
        )
        return data
