import io
import re

import numpy as np
import pytest

from scan_enhance.modules.pdf_builder import ScanPdfBuilder, points_to_pixels
from scan_enhance.modules.pipeline import EnhanceMode

PAGE_RE = re.compile(rb"/Type\s*/Page(?!s)")


def test_points_to_pixels():
    assert points_to_pixels(72, 300) == 300
    assert points_to_pixels(595, 72) == 595


def test_fit_scale_uses_tighter_axis():
    builder = ScanPdfBuilder(margin_pt=36)
    # Printable area is 523 x 770 points
    assert builder.fit_scale(1046, 100) == pytest.approx(0.5)
    assert builder.fit_scale(100, 1540) == pytest.approx(0.5)


def test_layout_page_is_a4_and_centered(document_rgb):
    builder = ScanPdfBuilder(mode=EnhanceMode.GRAYSCALE, dpi=72)
    enhanced = builder.enhancer.enhance(document_rgb, builder.mode)
    page = builder.layout_page(enhanced)
    assert page.size == (595, 842)
    assert page.mode == "RGB"
    # Wide image fills the printable width; top and bottom bands stay white
    assert page.getpixel((297, 5)) == (255, 255, 255)
    assert page.getpixel((297, 836)) == (255, 255, 255)


def test_binary_pages_are_greyscale(document_rgb):
    builder = ScanPdfBuilder(mode=EnhanceMode.BW_DOCUMENT, dpi=72)
    page = builder.layout_page(builder.enhancer.enhance(document_rgb, builder.mode))
    assert page.mode == "L"


def test_write_multi_page_pdf(document_rgb, blank_rgb):
    builder = ScanPdfBuilder(mode=EnhanceMode.SUPER_CLEAR, dpi=50)
    out = io.BytesIO()
    pages = builder.write([document_rgb, blank_rgb], out)
    data = out.getvalue()
    assert pages == 2
    assert data.startswith(b"%PDF")
    assert len(PAGE_RE.findall(data)) == 2


def test_write_rejects_empty_input():
    with pytest.raises(ValueError):
        ScanPdfBuilder().write([], io.BytesIO())


def test_write_files_skips_undecodable(tmp_path, document_png):
    bad = tmp_path / "broken.jpg"
    bad.write_bytes(b"garbage")
    out = tmp_path / "scan.pdf"
    pages = ScanPdfBuilder(dpi=50).write_files([str(bad), str(document_png)], str(out))
    assert pages == 1
    assert out.read_bytes().startswith(b"%PDF")


def test_write_files_all_undecodable(tmp_path):
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"garbage")
    with pytest.raises(ValueError):
        ScanPdfBuilder(dpi=50).write_files([str(bad)], str(tmp_path / "x.pdf"))


def test_write_files_requires_paths(tmp_path):
    with pytest.raises(ValueError):
        ScanPdfBuilder().write_files([], str(tmp_path / "x.pdf"))
