import numpy as np
import pytest

from scan_enhance.modules.errors import EmptyImageError, InvalidDimensionsError
from scan_enhance.modules.luminance import (
    as_pixel_buffer,
    opaque_copy,
    pack_argb,
    to_luminance,
    to_rgba,
)


def test_primary_colours_use_bt601_weights():
    img = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [255, 255, 255]]], dtype=np.uint8)
    gray = to_luminance(img)
    assert gray.dtype == np.uint8
    assert gray.tolist() == [[76, 150, 29, 255]]


def test_alpha_channel_is_ignored():
    rgba = np.zeros((2, 2, 4), dtype=np.uint8)
    rgba[..., :3] = 100
    rgba[..., 3] = 7
    assert (to_luminance(rgba) == 100).all()


def test_grey_input_is_copied_not_aliased():
    gray = np.full((3, 3), 42, dtype=np.uint8)
    out = to_luminance(gray)
    out[0, 0] = 0
    assert gray[0, 0] == 42


def test_empty_image_rejected():
    with pytest.raises(EmptyImageError):
        to_luminance(np.zeros((0, 5, 3), dtype=np.uint8))


def test_as_pixel_buffer_rejects_length_mismatch():
    with pytest.raises(InvalidDimensionsError) as excinfo:
        as_pixel_buffer([1, 2, 3, 4, 5], width=2, height=2)
    assert excinfo.value.details == {"length": 5, "width": 2, "height": 2}


def test_as_pixel_buffer_rejects_zero_dimension():
    with pytest.raises(EmptyImageError):
        as_pixel_buffer([], width=0, height=3)


def test_as_pixel_buffer_is_row_major():
    buf = as_pixel_buffer([1, 2, 3, 4, 5, 6], width=3, height=2)
    assert buf.shape == (2, 3)
    assert buf[1, 0] == 4


def test_rgba_expansion_is_opaque_grey():
    rgba = to_rgba(np.array([[0, 128]], dtype=np.uint8))
    assert rgba.tolist() == [[[0, 0, 0, 255], [128, 128, 128, 255]]]


def test_pack_argb():
    packed = pack_argb(np.array([[0, 255, 0x12]], dtype=np.uint8))
    assert packed.tolist() == [[0xFF000000, 0xFFFFFFFF, 0xFF121212]]


def test_opaque_copy_forces_alpha():
    src = np.random.default_rng(3).integers(0, 256, (5, 4, 4), dtype=np.uint8)
    out = opaque_copy(src)
    assert (out[..., :3] == src[..., :3]).all()
    assert (out[..., 3] == 255).all()
