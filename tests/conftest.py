import io
import os

# Must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "0")

import pytest
from PIL import Image

from app.media_utils import SourceImage


def make_image_bytes(width, height, fmt="PNG", mode="RGB", color=(200, 30, 30), noise=False, **save_kwargs):
    if noise:
        channels = len(mode)
        image = Image.frombytes(mode, (width, height), os.urandom(width * height * channels))
    else:
        image = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    image.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


def make_gradient_bytes(width, height, fmt="JPEG", **save_kwargs):
    image = Image.linear_gradient("L").resize((width, height)).convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


@pytest.fixture
def png_source():
    return SourceImage(data=make_image_bytes(100, 100), content_type="image/png", filename="square.png")


@pytest.fixture
def noisy_jpeg_source():
    data = make_image_bytes(400, 300, fmt="JPEG", noise=True, quality=95)
    return SourceImage(data=data, content_type="image/jpeg", filename="noise.jpg")
