"""
Basic example of extracting images from a PDF.
"""

import logging
from pathlib import Path
from pdf_image_reconstruct import PDFImageExtractor, ExtractionConfig, ImageExtractionError


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    # Path to your PDF file
    pdf_path = Path("example.pdf")

    # Configure extraction
    config = ExtractionConfig(
        output_dir="extracted_images",
        filename_prefix="img",
        skip_failed_images=True,  # Keep going past truncated image streams
    )

    extractor = PDFImageExtractor(config)

    try:
        result = extractor.extract_all_images(pdf_path)

        print("=" * 60)
        print("PDF IMAGE EXTRACTION COMPLETE")
        print("=" * 60)
        print(f"PDF: {result.pdf_path}")
        print(f"Image objects found: {result.images_found}")
        print(f"Soft masks merged: {result.alpha_layers}")
        print(f"Images extracted: {result.images_extracted}")
        print(f"Processing time: {result.extraction_time:.2f} seconds")
        print(f"Output directory: {result.output_directory}")

        if result.extracted_files:
            print("\nExtracted files:")
            for file in result.extracted_files[:5]:  # Show first 5
                print(f"  - {file}")
            if len(result.extracted_files) > 5:
                print(f"  ... and {len(result.extracted_files) - 5} more")

        for failure in result.failed_images:
            print(f"  ! {failure}")

    except FileNotFoundError:
        print(f"Error: PDF file not found at {pdf_path}")
    except ImageExtractionError as e:
        print(f"Error processing PDF: {e}")


if __name__ == "__main__":
    main()
