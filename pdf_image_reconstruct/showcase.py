"""
PDF Image Showcase - Re-embeds the discovered images on an extra page.
"""

import logging
from math import ceil, sqrt
from typing import Dict, Tuple
from pymupdf import Document, Rect

from .models import ImageDescriptor

logger = logging.getLogger(__name__)


def add_showcase_page(
    doc: Document,
    descriptors: Dict[int, ImageDescriptor],
    page_size: Tuple[float, float] = (700.0, 700.0),
    padding: float = 10.0,
) -> int:
    """
    Append a page showing every non-mask image of the document.

    Images are referenced by xref, not copied, and laid out in a square grid.
    Soft masks come along with the image that uses them.

    Args:
        doc: PDF document the descriptors were built from
        descriptors: Linked descriptors of the document
        page_size: Width and height of the new page
        padding: Space around each grid cell

    Returns:
        Number of images placed on the page
    """
    images = [d for d in descriptors.values() if not d.is_alpha_layer]

    width, height = page_size
    page = doc.new_page(width=width, height=height)

    if not images:
        logger.warning("No images to place on the showcase page")
        return 0

    columns = ceil(sqrt(len(images)))
    rows = ceil(len(images) / columns)
    cell_width = width / columns
    cell_height = height / rows

    placed = 0
    for index, descriptor in enumerate(images):
        row, column = divmod(index, columns)
        x0 = column * cell_width + padding
        y0 = row * cell_height + padding
        rect = Rect(x0, y0, x0 + cell_width - 2 * padding, y0 + cell_height - 2 * padding)

        try:
            page.insert_image(rect, xref=descriptor.identity)
        except (RuntimeError, ValueError) as e:
            logger.error(f"    ✗ Could not place {descriptor.display_name} on showcase page: {e}")
            continue

        placed += 1
        logger.debug(f"    ✓ Placed {descriptor.display_name} at ({x0:.0f}, {y0:.0f})")

    logger.info(f"Placed {placed}/{len(images)} images on showcase page {page.number + 1}")
    return placed


def write_showcase(
    doc: Document,
    descriptors: Dict[int, ImageDescriptor],
    output_path: str,
    page_size: Tuple[float, float] = (700.0, 700.0),
) -> int:
    """Add the showcase page and save the document to output_path."""
    placed = add_showcase_page(doc, descriptors, page_size=page_size)
    doc.save(output_path)
    logger.info(f"Showcase PDF written to {output_path}")
    return placed
