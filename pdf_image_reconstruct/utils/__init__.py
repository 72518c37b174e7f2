"""
Utility modules for PDF image reconstruction.
"""

from .storage import clear_output_dir, store_image
from .image_processing import (
    decide_color_model,
    encode_png,
    inflate_stream,
    reconstruct_pixels,
    recover_image,
)
from .pdf_utils import get_object_count, lookup_key, open_document

__all__ = [
    "clear_output_dir",
    "store_image",
    "decide_color_model",
    "encode_png",
    "inflate_stream",
    "reconstruct_pixels",
    "recover_image",
    "get_object_count",
    "lookup_key",
    "open_document",
]
