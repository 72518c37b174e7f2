"""
Local storage utilities for reconstructed images.
"""

import logging
import os
from glob import escape, glob
from os.path import join
from typing import Iterable

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("jpg", "png")
PARTIAL_EXTENSION = "part"


def clear_output_dir(output_dir: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> int:
    """
    Remove images left in the output directory by a previous run.

    Only files with the given extensions are removed, together with partial
    files of an interrupted write; anything else in the directory is left
    alone.

    Args:
        output_dir: Directory holding the output images
        extensions: File extensions to remove, without dots

    Returns:
        Number of files removed
    """
    os.makedirs(output_dir, exist_ok=True)

    removed = 0
    for ext in (*extensions, PARTIAL_EXTENSION):
        for filepath in sorted(glob(join(escape(output_dir), f"*.{ext}"))):
            if os.path.isfile(filepath):
                os.remove(filepath)
                removed += 1

    if removed:
        logger.info(f"Removed {removed} old images from {output_dir}")
    return removed


def store_image(output_dir: str, filename: str, image_data: bytes) -> str:
    """
    Store image data in the output directory.

    The data is written to a temporary file first and renamed into place, so
    a failed write never leaves a truncated image behind.

    Args:
        output_dir: Directory to write to
        filename: Name of the file to store
        image_data: Binary image data

    Returns:
        Path of the stored image

    Raises:
        OSError: If the file cannot be written
    """
    filepath = join(output_dir, filename)
    partial = f"{filepath}.{PARTIAL_EXTENSION}"

    try:
        with open(partial, "wb") as f:
            f.write(image_data)
        os.replace(partial, filepath)
    except OSError:
        if os.path.exists(partial):
            os.remove(partial)
        raise

    logger.info(f"Saved {filename} to local directory: {output_dir}")
    return filepath
