"""
PDF Image Extractor - Core extraction functionality.
"""

import logging
from dataclasses import dataclass
from os import makedirs
from os.path import exists
from pathlib import Path
from time import time
from typing import Dict, List, Optional, Tuple

from .descriptors import load_image_descriptors, log_image_summary
from .exceptions import DataBoundsError, StreamDecodeError
from .models import ExtractionConfig, ExtractionResult, ImageDescriptor, ReconstructedImage
from .showcase import write_showcase
from .utils.image_processing import recover_image
from .utils.pdf_utils import open_document
from .utils.storage import clear_output_dir, store_image

logger = logging.getLogger(__name__)


@dataclass
class PDFImageExtractor:
    """Extracts images from PDF documents, merging soft masks into PNG alpha."""

    config: ExtractionConfig

    def __post_init__(self):
        # Create output directory if it doesn't exist
        if not exists(self.config.output_dir):
            logger.info(f"Creating output directory: {self.config.output_dir}")
            makedirs(self.config.output_dir, exist_ok=True)

    def load_descriptors(self, doc) -> Dict[int, ImageDescriptor]:
        """Build and link the image descriptors of a document and log them."""
        descriptors = load_image_descriptors(doc)
        log_image_summary(descriptors)
        return descriptors

    def output_filename(self, index: int, image: ReconstructedImage) -> str:
        """Name of the index-th persisted image (1-based)."""
        return f"{self.config.filename_prefix}{index}.{image.ext}"

    def extract_descriptors(
        self, descriptors: Dict[int, ImageDescriptor]
    ) -> Tuple[List[str], List[str]]:
        """
        Reconstruct and store every image that is not a soft mask.

        Args:
            descriptors: Linked descriptors in document order

        Returns:
            Paths of the written files and descriptions of the images that failed
        """
        if self.config.clear_output_dir:
            clear_output_dir(self.config.output_dir)

        extracted_files: List[str] = []
        failed_images: List[str] = []

        for descriptor in descriptors.values():
            if descriptor.is_alpha_layer:
                logger.debug(f"    Skipping soft mask {descriptor.display_name} (xref: {descriptor.identity})")
                continue

            alpha_layer = None
            if descriptor.has_alpha_layer:
                alpha_layer = descriptors[descriptor.mask_identity]

            try:
                image = recover_image(descriptor, alpha_layer)
            except (DataBoundsError, StreamDecodeError) as e:
                if not self.config.skip_failed_images:
                    raise
                logger.error(f"    ✗ Error reconstructing image {descriptor.identity}: {e}")
                failed_images.append(str(e))
                continue

            filename = self.output_filename(len(extracted_files) + 1, image)
            filepath = store_image(self.config.output_dir, filename, image.image)

            extracted_files.append(filepath)

            logger.info(
                f"    ✓ Extracted: {filename} ({len(image.image)} bytes, {descriptor.width}x{descriptor.height})"
            )

        return extracted_files, failed_images

    def extract_all_images(
        self, pdf_path: Path, file_contents: Optional[bytes] = None
    ) -> ExtractionResult:
        """Extract all images from a PDF document."""
        if not pdf_path.exists() and not file_contents:
            raise FileNotFoundError(f"PDF file does not exist: {pdf_path}")

        start_time = time()
        doc = open_document(pdf_path, file_contents)

        try:
            logger.info(f"Processing PDF: {pdf_path}")
            logger.info(f"Output directory: {self.config.output_dir}")

            descriptors = self.load_descriptors(doc)
            extracted_files, failed_images = self.extract_descriptors(descriptors)

            showcase_pdf = None
            if self.config.showcase_path:
                write_showcase(
                    doc,
                    descriptors,
                    self.config.showcase_path,
                    page_size=self.config.showcase_page_size,
                )
                showcase_pdf = self.config.showcase_path

            end_time = time()

            return ExtractionResult(
                pdf_path=str(pdf_path),
                images_found=len(descriptors),
                alpha_layers=sum(1 for d in descriptors.values() if d.is_alpha_layer),
                images_extracted=len(extracted_files),
                failed_images=failed_images,
                extracted_files=extracted_files,
                output_directory=self.config.output_dir,
                showcase_pdf=showcase_pdf,
                extraction_time=end_time - start_time,
            )

        finally:
            doc.close()
