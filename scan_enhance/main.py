"""CLI entrypoint for document scan enhancement."""
import argparse
import logging
import sys
from pathlib import Path

from scan_enhance.config import get_settings
from scan_enhance.modules.errors import EnhancementError
from scan_enhance.modules.image_toolkit import ImageToolkit
from scan_enhance.modules.pdf_builder import ScanPdfBuilder
from scan_enhance.modules.pipeline import EnhanceMode, ScanEnhancer
from scan_enhance.utils.custom_logging import setup_logging

logger = logging.getLogger("scan-enhance.cli")

MODE_CHOICES = [m.value for m in EnhanceMode]


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Turn photographed documents into clean scans",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to SCAN_ENHANCE_LOG_LEVEL)",
    )
    p.add_argument(
        "--plain-logs",
        action="store_true",
        help="Plain text logs instead of JSON",
    )
    sub = p.add_subparsers(dest="command", required=True)

    enh = sub.add_parser("enhance", help="Enhance a single image")
    enh.add_argument("image", help="Path to the image file")
    enh.add_argument("--mode", choices=MODE_CHOICES, default=None)
    enh.add_argument(
        "--output",
        default=None,
        help="Output path (defaults to <image>_<mode> with the mode's format)",
    )
    enh.add_argument(
        "--preview",
        action="store_true",
        help="Downscale before enhancing",
    )

    pdf = sub.add_parser("pdf", help="Build a scan PDF from images")
    pdf.add_argument("images", nargs="+", help="Image files, one per page")
    pdf.add_argument("--output", required=True, help="Output PDF path")
    pdf.add_argument("--mode", choices=MODE_CHOICES, default=None)

    sub.add_parser("modes", help="List enhancement modes")
    return p.parse_args(argv)


def default_output_path(image_path: str, mode: EnhanceMode, ext: str) -> str:
    src = Path(image_path)
    return str(src.with_name(f"{src.stem}_{mode.value}{ext}"))


def run_enhance(args, settings) -> int:
    mode = EnhanceMode(args.mode) if args.mode else settings.default_mode

    with open(args.image, "rb") as fh:
        payload = fh.read()
    problem = ImageToolkit.validate_image(payload, settings.max_image_size_mb)
    if problem:
        logger.error("%s: %s", args.image, problem)
        return 1

    img = ImageToolkit.decode_image(payload)
    if img is None:
        logger.error("Could not load image from %s", args.image)
        return 1
    if args.preview:
        img = ImageToolkit.scale_for_preview(img, settings.preview_max_side)

    result = ScanEnhancer().enhance(img, mode)
    data, ext = ImageToolkit.encode_result(result, mode, settings.jpeg_quality)
    output = args.output or default_output_path(args.image, mode, ext)
    with open(output, "wb") as fh:
        fh.write(data)

    print(output)
    return 0


def run_pdf(args, settings) -> int:
    mode = EnhanceMode(args.mode) if args.mode else settings.default_mode
    builder = ScanPdfBuilder(
        mode=mode, dpi=settings.pdf_dpi, margin_pt=settings.pdf_margin_pt
    )
    pages = builder.write_files(args.images, args.output)
    print(f"{args.output}: {pages} page(s)")
    return 0


def run_modes() -> int:
    for mode in EnhanceMode:
        print(f"{mode.value:<12} {mode.label:<13} {mode.description}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(
        level=(args.log_level or settings.log_level).upper(),
        json_output=settings.json_logs and not args.plain_logs,
    )

    try:
        if args.command == "enhance":
            return run_enhance(args, settings)
        if args.command == "pdf":
            return run_pdf(args, settings)
        return run_modes()
    except (EnhancementError, ValueError, OSError) as e:
        logger.error("scan-enhance %s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
