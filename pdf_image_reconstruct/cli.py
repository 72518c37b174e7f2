"""
Command line entry point: pdf-extract-images.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional
from pymupdf import FileDataError

from .exceptions import ImageExtractionError
from .extractor import PDFImageExtractor
from .models import ExtractionConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-extract-images",
        description="Extract the raster images of a PDF as PNG and JPEG files",
    )
    parser.add_argument("pdf_file", type=Path, help="Path to the PDF file")
    parser.add_argument(
        "-o", "--output-dir", default="images", help="Directory for the extracted images"
    )
    parser.add_argument("--prefix", default="out", help="Prefix of the output file names")
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Do not remove images left in the output directory by a previous run",
    )
    parser.add_argument(
        "--skip-failed",
        action="store_true",
        help="Log and skip images whose data cannot be rebuilt instead of aborting",
    )
    parser.add_argument(
        "--showcase",
        metavar="PDF",
        help="Also write a copy of the PDF with every image placed on an extra page",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = ExtractionConfig(
            output_dir=args.output_dir,
            filename_prefix=args.prefix,
            clear_output_dir=not args.keep_existing,
            skip_failed_images=args.skip_failed,
            showcase_path=args.showcase,
        )
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        return 1

    try:
        extractor = PDFImageExtractor(config)
        result = extractor.extract_all_images(args.pdf_file)
    except FileNotFoundError:
        logger.error(f"Error: PDF file not found at {args.pdf_file}")
        return 1
    except FileDataError as e:
        logger.error(f"Error: {args.pdf_file} is not a readable PDF: {e}")
        return 1
    except ImageExtractionError as e:
        logger.error(f"Error processing PDF: {e}")
        return 1
    except OSError as e:
        logger.error(f"Error writing images to {config.output_dir}: {e}")
        return 1

    print()
    print(f"Images found: {result.images_found} ({result.alpha_layers} soft masks)")
    print(f"Images extracted: {result.images_extracted}")
    if result.failed_images:
        print(f"Images skipped: {len(result.failed_images)}")
    if result.showcase_pdf:
        print(f"Showcase PDF: {result.showcase_pdf}")
    print(f"Images written to {result.output_directory}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
