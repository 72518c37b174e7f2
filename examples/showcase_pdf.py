"""
Example of re-embedding every image of a PDF on an extra page.
"""

from pathlib import Path
from pymupdf import open as pdfopen

from pdf_image_reconstruct import load_image_descriptors
from pdf_image_reconstruct.showcase import write_showcase


def main(pdf_path: Path):
    doc = pdfopen(str(pdf_path))

    try:
        descriptors = load_image_descriptors(doc)

        output_path = pdf_path.stem + "_showcase.pdf"
        placed = write_showcase(doc, descriptors, output_path, page_size=(700, 700))

        print("=" * 60)
        print("PDF SHOWCASE COMPLETE")
        print("=" * 60)
        print(f"Original PDF: {pdf_path}")
        print(f"Showcase PDF: {output_path}")
        print(f"Images placed: {placed}")

    finally:
        doc.close()


if __name__ == "__main__":
    # Path to your PDF file
    pdf = Path("example.pdf")
    main(pdf)
