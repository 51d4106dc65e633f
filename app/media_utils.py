"""
Image compression utilities used by the blog image upload flow.

Images are decoded with Pillow, turned upright per their EXIF orientation,
scaled down to fit a bounding box and re-encoded at decreasing quality
until the base64 payload fits a byte budget. The Pillow work is blocking,
so the public coroutines hand it to the threadpool and never block the
event loop.
"""
import base64
import io
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from PIL import ExifTags, Image, ImageOps, UnidentifiedImageError
from pydantic import BaseModel, Field

from .exceptions import DecodeError, EncodeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_BYTES = 1024 * 1024

QUALITY_FLOOR = 0.1
QUALITY_STEP = 0.85
MAX_ATTEMPTS = 8
NON_JPEG_FALLBACK_QUALITY = 0.7
JPEG_FALLBACK_QUALITY = 0.3

# Formats the encoder can write; anything else is written as PNG.
_ENCODER_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
}
_FORMAT_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "PNG": "image/png",
}

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

# EXIF orientations that rotate the picture by 90 degrees
_TRANSPOSED_ORIENTATIONS = (5, 6, 7, 8)


@dataclass(frozen=True)
class SourceImage:
    data: bytes
    content_type: str = "application/octet-stream"
    filename: str = "image"

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    async def from_upload(cls, upload: UploadFile) -> "SourceImage":
        data = await upload.read()
        await upload.seek(0)
        return cls(
            data=data,
            content_type=upload.content_type or "application/octet-stream",
            filename=upload.filename or "upload",
        )

    @classmethod
    def from_base64(cls, base64_data: str, filename: str = "image") -> "SourceImage":
        """Build a source image from a data URL or a bare base64 string."""
        if "," in base64_data:
            header, data = base64_data.split(",", 1)
            content_type = header.split(":")[1].split(";")[0] if ":" in header else "image/jpeg"
        else:
            data = base64_data
            content_type = "image/jpeg"
        try:
            raw = base64.b64decode(data, validate=True)
        except ValueError as e:
            raise DecodeError("Invalid base64 image data") from e
        return cls(data=raw, content_type=content_type, filename=filename)


class CompressionOptions(BaseModel):
    max_width: int = Field(1200, gt=0)
    max_height: int = Field(800, gt=0)
    quality: float = Field(0.8, gt=0, le=1)
    max_size_bytes: int = Field(DEFAULT_MAX_SIZE_BYTES, gt=0)


class ImageDimensions(BaseModel):
    width: int
    height: int


class CompressedImageResult(BaseModel):
    base64: str
    filename: str
    content_type: str
    size: int
    original_size: int
    compression_ratio: float
    width: int
    height: int
    quality: float
    attempts: int


def calculate_dimensions(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Fit (width, height) inside the bounding box, preserving aspect ratio."""
    if width <= max_width and height <= max_height:
        return width, height

    ratio = min(max_width / width, max_height / height)
    # Round half up so 1066.5 becomes 1067 like a browser would
    return (
        max(1, int(math.floor(width * ratio + 0.5))),
        max(1, int(math.floor(height * ratio + 0.5))),
    )


def base64_payload_size(encoded: str) -> int:
    """Decoded byte estimate of a base64 string or data URL."""
    payload = encoded.split(",", 1)[1] if "," in encoded else encoded
    return math.ceil(len(payload) * 0.75)


def should_compress(file: SourceImage, max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES) -> bool:
    return file.size > max_size_bytes


def estimate_base64_size(byte_size: int) -> int:
    """Pre-flight estimate of the base64 size of byte_size raw bytes."""
    return math.ceil(byte_size * 1.33)


def format_file_size(size_bytes: float) -> str:
    if size_bytes == 0:
        return "0 Bytes"

    k = 1024
    i = int(math.floor(math.log(size_bytes) / math.log(k)))
    i = max(0, min(i, len(_SIZE_UNITS) - 1))
    value = ("%.2f" % (size_bytes / math.pow(k, i))).rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[i]}"


def file_to_data_url(file: SourceImage) -> str:
    """Encode the untouched file bytes as a data URL."""
    encoded = base64.b64encode(file.data).decode("ascii")
    return f"data:{file.content_type};base64,{encoded}"


def _is_jpeg(mime_type: str) -> bool:
    return _ENCODER_FORMATS.get(mime_type) == "JPEG"


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info)


def _pillow_quality(quality: float) -> int:
    return max(1, min(95, int(round(quality * 100))))


@contextmanager
def _decoded(file: SourceImage, load: bool = True) -> Iterator[Image.Image]:
    """Open the image, and when load is set, decode it upright per its EXIF orientation."""
    try:
        image = Image.open(io.BytesIO(file.data))
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        raise DecodeError("Failed to load image") from e
    upright = image
    try:
        if load:
            try:
                image.load()
                upright = ImageOps.exif_transpose(image)
            except (OSError, SyntaxError, ValueError) as e:
                raise DecodeError("Failed to load image") from e
        yield upright
    finally:
        if upright is not image:
            upright.close()
        image.close()


def _render(image: Image.Image, width: int, height: int) -> Image.Image:
    try:
        surface = image.convert("RGBA" if _has_alpha(image) else "RGB")
        if surface.size != (width, height):
            surface = surface.resize((width, height), Image.Resampling.LANCZOS)
    except (OSError, ValueError, MemoryError) as e:
        raise EncodeError("Failed to create rendering surface") from e
    return surface


def _encode(surface: Image.Image, mime_type: str, quality: float) -> str:
    fmt = _ENCODER_FORMATS.get(mime_type, "PNG")
    frame = surface
    if fmt == "JPEG" and frame.mode != "RGB":
        frame = frame.convert("RGB")

    buf = io.BytesIO()
    try:
        if fmt == "PNG":
            # PNG is lossless, quality has no effect
            frame.save(buf, format=fmt, optimize=True)
        else:
            frame.save(buf, format=fmt, quality=_pillow_quality(quality))
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode image as {fmt}") from e

    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:{_FORMAT_MIME_TYPES[fmt]};base64,{encoded}"


def _find_optimal_quality(
    surface: Image.Image, mime_type: str, initial_quality: float, max_size_bytes: int
) -> Tuple[str, float, int]:
    quality = initial_quality
    attempts = 0

    while attempts < MAX_ATTEMPTS:
        data_url = _encode(surface, mime_type, quality)
        attempts += 1
        size = base64_payload_size(data_url)
        logger.debug(f"Compression attempt {attempts}: quality={quality:.3f} size={size}")
        if size <= max_size_bytes or quality <= QUALITY_FLOOR:
            return data_url, quality, attempts
        quality *= QUALITY_STEP

    # Best effort: the fallback encoding is returned even if it is over budget
    fallback = JPEG_FALLBACK_QUALITY if _is_jpeg(mime_type) else NON_JPEG_FALLBACK_QUALITY
    logger.info(f"Byte budget not met after {MAX_ATTEMPTS} attempts, forcing JPEG at quality {fallback}")
    return _encode(surface, "image/jpeg", fallback), fallback, attempts + 1


def _content_type_of(data_url: str) -> str:
    return data_url[len("data:"):data_url.index(";")]


def _compress(file: SourceImage, options: CompressionOptions) -> CompressedImageResult:
    with _decoded(file) as image:
        width, height = calculate_dimensions(image.width, image.height, options.max_width, options.max_height)
        surface = _render(image, width, height)

    try:
        data_url, quality, attempts = _find_optimal_quality(
            surface, file.content_type, options.quality, options.max_size_bytes
        )
    finally:
        surface.close()

    size = base64_payload_size(data_url)
    result = CompressedImageResult(
        base64=data_url,
        filename=file.filename,
        content_type=_content_type_of(data_url),
        size=size,
        original_size=file.size,
        compression_ratio=file.size / size,
        width=width,
        height=height,
        quality=quality,
        attempts=attempts,
    )
    logger.info(
        f"Compressed {file.filename} from {format_file_size(file.size)} to {format_file_size(size)} "
        f"({width}x{height}, {attempts} attempt(s))"
    )
    return result


async def compress_image(file: SourceImage, options: Optional[CompressionOptions] = None) -> CompressedImageResult:
    """
    Scale an image to fit the configured box and re-encode it under a byte budget.

    Raises DecodeError when the bytes are not an image and EncodeError when
    the scaled surface cannot be created or encoded.
    """
    return await run_in_threadpool(_compress, file, options or CompressionOptions())


def _dimensions(file: SourceImage) -> ImageDimensions:
    # Only the header is parsed; pixel data is never loaded
    with _decoded(file, load=False) as image:
        width, height = image.size
        if image.getexif().get(ExifTags.Base.Orientation) in _TRANSPOSED_ORIENTATIONS:
            width, height = height, width
        return ImageDimensions(width=width, height=height)


async def get_image_dimensions(file: SourceImage) -> ImageDimensions:
    return await run_in_threadpool(_dimensions, file)
