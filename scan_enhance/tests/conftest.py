import os

import numpy as np
import pytest
from PIL import Image, ImageDraw, ImageFont

# Keep settings deterministic regardless of the developer's .env
os.environ.setdefault("SCAN_ENHANCE_LOG_LEVEL", "WARNING")


@pytest.fixture
def checkerboard_4x4():
    """255 where x + y is even, 0 elsewhere."""
    yy, xx = np.mgrid[0:4, 0:4]
    return np.where((xx + yy) % 2 == 0, 255, 0).astype(np.uint8)


@pytest.fixture
def blank_rgb():
    return np.full((40, 60, 3), 255, dtype=np.uint8)


@pytest.fixture
def document_rgb():
    """A photographed-page stand-in: dark text on an unevenly lit page."""
    img = Image.new("RGB", (320, 200), color=(235, 228, 215))
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()
    for row in range(5):
        draw.text((12, 20 + row * 34), "SCAN ENHANCE 0123", fill=(30, 30, 40), font=font)
    pixels = np.asarray(img).astype(np.int32)
    # Vignette towards the right edge
    shade = np.linspace(0, 60, pixels.shape[1]).astype(np.int32)
    pixels -= shade[None, :, None]
    return np.clip(pixels, 0, 255).astype(np.uint8)


@pytest.fixture
def document_png(tmp_path, document_rgb):
    path = tmp_path / "page.png"
    Image.fromarray(document_rgb).save(path)
    return path
