"""
PDFImageReconstruct - Extract images from PDFs and rebuild them as PNG/JPEG files

A Python package for extracting the raster images embedded in PDF documents,
merging their soft masks into an alpha channel and writing standalone files.
"""

from .extractor import PDFImageExtractor
from .descriptors import (
    build_image_descriptors,
    link_alpha_layers,
    load_image_descriptors,
)
from .exceptions import (
    ImageExtractionError,
    MalformedDocumentError,
    UnsupportedConfigurationError,
    DataBoundsError,
    StreamDecodeError,
)
from .models import (
    ColorSpace,
    Compression,
    ColorModel,
    ImageDescriptor,
    PixelBuffer,
    ReconstructedImage,
    ExtractionConfig,
    ExtractionResult,
)
from .utils.image_processing import recover_image, reconstruct_pixels

__version__ = "1.0.0"
__all__ = [
    "PDFImageExtractor",
    "build_image_descriptors",
    "link_alpha_layers",
    "load_image_descriptors",
    "recover_image",
    "reconstruct_pixels",
    "ImageExtractionError",
    "MalformedDocumentError",
    "UnsupportedConfigurationError",
    "DataBoundsError",
    "StreamDecodeError",
    "ColorSpace",
    "Compression",
    "ColorModel",
    "ImageDescriptor",
    "PixelBuffer",
    "ReconstructedImage",
    "ExtractionConfig",
    "ExtractionResult",
]
