import numpy as np

from scan_enhance.modules.filters import gaussian_blur
from scan_enhance.modules.sharpen import SharpenParams, unsharp_mask


def _step_edge():
    img = np.full((10, 10), 50, dtype=np.uint8)
    img[:, 5:] = 200
    return img


def test_flat_image_passes_through():
    flat = np.full((8, 8), 90, dtype=np.uint8)
    assert (unsharp_mask(flat, SharpenParams()) == flat).all()


def test_sharpening_pushes_edges_away_from_blur():
    enhanced = _step_edge()
    blurred = gaussian_blur(enhanced).astype(int)
    params = SharpenParams(amount=1.8, threshold=4)
    out = unsharp_mask(enhanced, params).astype(int)

    src = enhanced.astype(int)
    diff = src - blurred
    edges = np.abs(diff) > params.threshold
    assert edges.any()

    before = np.abs(src - blurred)[edges]
    after = np.abs(out - blurred)[edges]
    clamped = np.isin(out[edges], (0, 255))
    assert ((after > before) | clamped).all()
    assert (out[~edges] == src[~edges]).all()
    assert out.min() >= 0 and out.max() <= 255


def test_dark_side_of_edge_is_clamped_to_black():
    out = unsharp_mask(_step_edge(), SharpenParams(amount=1.8, threshold=4))
    assert out[5, 4] == 0
    assert out[5, 5] == 255


def test_rebinarize_keeps_output_black_and_white():
    rng = np.random.default_rng(9)
    binary = np.where(rng.random((20, 20)) < 0.3, 0, 255).astype(np.uint8)
    out = unsharp_mask(binary, SharpenParams(amount=1.5, threshold=2, rebinarize=True))
    assert set(np.unique(out).tolist()) <= {0, 255}


def test_small_differences_are_ignored():
    img = np.full((9, 9), 100, dtype=np.uint8)
    img[4, 4] = 103
    out = unsharp_mask(img, SharpenParams(amount=1.8, threshold=4))
    assert (out == img).all()
