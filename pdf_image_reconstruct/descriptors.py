"""
Image descriptor building and soft-mask linking.

Descriptors are built in two phases: every image object is first
materialized into a plain ImageDescriptor, then a second pass over the
finished mapping resolves soft-mask links by identity.
"""

import logging
from typing import Dict

from pymupdf import Document

from .exceptions import MalformedDocumentError
from .models import ColorSpace, Compression, ImageDescriptor
from .utils.pdf_utils import (
    get_bool,
    get_filter_names,
    get_int,
    get_name,
    get_raw_stream,
    get_reference,
    iter_stream_objects,
    lookup_key,
)

logger = logging.getLogger(__name__)

JPEG_FILTER = "DCTDecode"


def build_descriptor(doc: Document, xref: int, position: int) -> ImageDescriptor:
    """
    Materialize one image object into a descriptor.

    Args:
        doc: PDF document object
        xref: Cross-reference number of the image object
        position: 1-based position of the object in the document

    Returns:
        Descriptor with every field resolved

    Raises:
        MalformedDocumentError: If width, height or bits per component is missing
    """
    display_name = get_name(doc, xref, "Name") or f"Object{position}"

    width = get_int(doc, xref, "Width")
    height = get_int(doc, xref, "Height")
    bits_per_component = get_int(doc, xref, "BitsPerComponent")
    if bits_per_component is None and get_bool(doc, xref, "ImageMask"):
        # Stencil masks may omit the bit depth; it is always 1
        bits_per_component = 1

    for key, value in (
        ("Width", width),
        ("Height", height),
        ("BitsPerComponent", bits_per_component),
    ):
        if value is None or value <= 0:
            raise MalformedDocumentError(
                f"Image object lacks a valid /{key}", display_name, xref
            )

    filters = get_filter_names(doc, xref)
    compression = Compression.JPEG if filters == [JPEG_FILTER] else Compression.FLATE

    # Soft masks of JPEG images are not modelled
    mask_identity = None
    if compression is Compression.FLATE:
        mask_identity = get_reference(doc, xref, "SMask")

    color_space_name = get_name(doc, xref, "ColorSpace")
    if color_space_name is not None:
        color_space_label = color_space_name
    else:
        kind, value = lookup_key(doc, xref, "ColorSpace")
        color_space_label = "" if kind == "null" else value

    return ImageDescriptor(
        identity=xref,
        mask_identity=mask_identity,
        color_space=ColorSpace.from_name(color_space_name),
        color_space_label=color_space_label,
        width=width,
        height=height,
        bits_per_component=bits_per_component,
        compression=compression,
        filter_name=" ".join(filters),
        display_name=display_name,
        raw_data=get_raw_stream(doc, xref),
    )


def build_image_descriptors(doc: Document) -> Dict[int, ImageDescriptor]:
    """
    Build a descriptor for every image object, in document order.

    Args:
        doc: PDF document object

    Returns:
        Mapping from xref to descriptor; masks are not linked yet
    """
    descriptors: Dict[int, ImageDescriptor] = {}

    for position, xref in iter_stream_objects(doc):
        if get_name(doc, xref, "Subtype") != "Image":
            continue
        descriptors[xref] = build_descriptor(doc, xref, position)

    logger.info(f"Found {len(descriptors)} image objects")
    return descriptors


def link_alpha_layers(descriptors: Dict[int, ImageDescriptor]) -> None:
    """
    Resolve soft-mask links and flag the referenced descriptors as alpha layers.

    All links are validated before any descriptor is modified.

    Raises:
        MalformedDocumentError: If a mask reference is dangling, circular or shared
    """
    owners: Dict[int, int] = {}

    for descriptor in descriptors.values():
        if not descriptor.has_alpha_layer:
            continue

        mask_identity = descriptor.mask_identity
        if mask_identity == descriptor.identity:
            raise MalformedDocumentError(
                "Image uses itself as soft mask",
                descriptor.display_name,
                descriptor.identity,
            )
        if mask_identity not in descriptors:
            raise MalformedDocumentError(
                f"Soft mask xref {mask_identity} is not an image object",
                descriptor.display_name,
                descriptor.identity,
            )
        if mask_identity in owners:
            raise MalformedDocumentError(
                f"Soft mask xref {mask_identity} is already used by xref {owners[mask_identity]}",
                descriptor.display_name,
                descriptor.identity,
            )
        owners[mask_identity] = descriptor.identity

    for mask_identity in owners:
        descriptors[mask_identity].is_alpha_layer = True

    logger.debug(f"Linked {len(owners)} soft masks")


def load_image_descriptors(doc: Document) -> Dict[int, ImageDescriptor]:
    """Build all descriptors and link their soft masks."""
    descriptors = build_image_descriptors(doc)
    link_alpha_layers(descriptors)
    return descriptors


def describe_descriptor(descriptor: ImageDescriptor) -> str:
    """One-line human readable summary of a descriptor."""
    return (
        f"Name: {descriptor.display_name} | "
        f"Type: {descriptor.compression.extension} | "
        f"Color Space: {descriptor.color_space_label or descriptor.color_space.value} | "
        f"Has Alpha Layer? {descriptor.has_alpha_layer} | "
        f"Is Alpha Layer? {descriptor.is_alpha_layer} | "
        f"Width: {descriptor.width} | "
        f"Height: {descriptor.height} | "
        f"Bits Per Component: {descriptor.bits_per_component} | "
        f"Data: {len(descriptor.raw_data)} bytes | "
        f"Ref: {descriptor.identity} 0 R"
    )


def log_image_summary(descriptors: Dict[int, ImageDescriptor]) -> None:
    """Log one summary line per discovered image."""
    logger.info("===== Images in PDF =====")
    for descriptor in descriptors.values():
        logger.info(describe_descriptor(descriptor))
