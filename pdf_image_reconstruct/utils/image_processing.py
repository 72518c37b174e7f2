"""
Image processing utilities for PDF image extraction.

Rebuilds pixel buffers from inflated image streams and their soft masks and
serializes them as PNG. JPEG streams are passed through untouched.
"""

import io
import logging
import zlib
from typing import Callable, Dict, Optional
from PIL import Image

from ..exceptions import (
    DataBoundsError,
    MalformedDocumentError,
    StreamDecodeError,
    UnsupportedConfigurationError,
)
from ..models import (
    ColorModel,
    ColorSpace,
    ImageDescriptor,
    PixelBuffer,
    ReconstructedImage,
)

logger = logging.getLogger(__name__)


def inflate_stream(descriptor: ImageDescriptor) -> bytes:
    """
    Inflate the raw stream of a descriptor.

    Args:
        descriptor: Descriptor whose raw data is zlib/deflate compressed

    Returns:
        Inflated stream bytes

    Raises:
        StreamDecodeError: If the raw data is not a valid deflate stream
    """
    try:
        return zlib.decompress(descriptor.raw_data)
    except zlib.error as e:
        raise StreamDecodeError(
            f"Could not inflate image stream: {e}",
            descriptor.display_name,
            descriptor.identity,
        ) from e


def decide_color_model(descriptor: ImageDescriptor, has_alpha: bool) -> ColorModel:
    """
    Derive the output color model of a descriptor.

    DeviceGray images become grayscale, everything else is treated as RGB.
    A linked soft mask adds an alpha channel.
    """
    if descriptor.color_space is ColorSpace.DEVICE_GRAY:
        return ColorModel.GRAYSCALE_ALPHA if has_alpha else ColorModel.GRAYSCALE
    return ColorModel.RGB_ALPHA if has_alpha else ColorModel.RGB


def _require_length(
    stream: bytes, required: int, channel: str, descriptor: ImageDescriptor
) -> None:
    if len(stream) < required:
        raise DataBoundsError(
            f"{channel} stream holds {len(stream)} bytes, "
            f"{descriptor.width}x{descriptor.height} pixels need {required}",
            descriptor.display_name,
            descriptor.identity,
        )


def read_bit_from_end(buffer: bytes, bit_offset: int) -> int:
    """
    Read one bit, counting bytes from the end of the buffer.

    Bit offset 0 is the least significant bit of the last byte, offset 8 the
    least significant bit of the byte before it, and so on.
    """
    byte = buffer[len(buffer) - 1 - bit_offset // 8]
    return (byte >> (bit_offset % 8)) & 1


def expand_bits_from_end(stream: bytes, pixel_count: int) -> bytearray:
    """
    Expand a 1-bit stream into 0x00/0xFF samples.

    Bits are consumed from the end of the stream and written from the end of
    the output, so the two reversals cancel out.
    """
    samples = bytearray(pixel_count)
    last = pixel_count - 1
    for bit_offset in range(pixel_count):
        if read_bit_from_end(stream, bit_offset):
            samples[last - bit_offset] = 0xFF
    return samples


def _unpack_channel(
    stream: bytes,
    bits: int,
    channel: str,
    descriptor: ImageDescriptor,
) -> bytes:
    # One 8-bit sample per pixel, from 1-bit or 8-bit single channel data
    pixel_count = descriptor.pixel_count
    if bits == 1:
        _require_length(stream, (pixel_count + 7) // 8, channel, descriptor)
        return bytes(expand_bits_from_end(stream, pixel_count))
    if bits == 8:
        _require_length(stream, pixel_count, channel, descriptor)
        return stream[:pixel_count]
    raise UnsupportedConfigurationError(
        f"{bits}-bit {channel} samples are not supported",
        descriptor.display_name,
        descriptor.identity,
    )


def _require_8bit_color(descriptor: ImageDescriptor) -> None:
    if descriptor.bits_per_component != 8:
        raise UnsupportedConfigurationError(
            f"{descriptor.bits_per_component}-bit RGB samples are not supported",
            descriptor.display_name,
            descriptor.identity,
        )


def _rebuild_grayscale(descriptor, color, alpha, alpha_bits) -> bytes:
    return _unpack_channel(color, descriptor.bits_per_component, "color", descriptor)


def _rebuild_grayscale_alpha(descriptor, color, alpha, alpha_bits) -> bytes:
    gray = _unpack_channel(color, descriptor.bits_per_component, "color", descriptor)
    opacity = _unpack_channel(alpha, alpha_bits, "mask", descriptor)

    samples = bytearray(descriptor.pixel_count * 2)
    samples[0::2] = gray
    samples[1::2] = opacity
    return bytes(samples)


def _rebuild_rgb(descriptor, color, alpha, alpha_bits) -> bytes:
    _require_8bit_color(descriptor)
    size = descriptor.pixel_count * 3
    _require_length(color, size, "color", descriptor)
    return color[:size]


def _rebuild_rgb_alpha(descriptor, color, alpha, alpha_bits) -> bytes:
    _require_8bit_color(descriptor)
    size = descriptor.pixel_count * 3
    _require_length(color, size, "color", descriptor)
    opacity = _unpack_channel(alpha, alpha_bits, "mask", descriptor)

    samples = bytearray(descriptor.pixel_count * 4)
    samples[0::4] = color[0:size:3]
    samples[1::4] = color[1:size:3]
    samples[2::4] = color[2:size:3]
    samples[3::4] = opacity
    return bytes(samples)


_Reconstructor = Callable[[ImageDescriptor, bytes, Optional[bytes], int], bytes]

RECONSTRUCTORS: Dict[ColorModel, _Reconstructor] = {
    ColorModel.GRAYSCALE: _rebuild_grayscale,
    ColorModel.GRAYSCALE_ALPHA: _rebuild_grayscale_alpha,
    ColorModel.RGB: _rebuild_rgb,
    ColorModel.RGB_ALPHA: _rebuild_rgb_alpha,
}


def reconstruct_pixels(
    descriptor: ImageDescriptor,
    color: bytes,
    alpha: Optional[bytes] = None,
    alpha_bits: int = 8,
) -> PixelBuffer:
    """
    Rebuild the 8-bit pixel buffer of an image.

    Args:
        descriptor: Descriptor of the color image
        color: Inflated color stream
        alpha: Inflated soft mask stream, if the image has one
        alpha_bits: Bits per component of the soft mask

    Returns:
        PixelBuffer with exactly width * height * components samples

    Raises:
        DataBoundsError: If a stream is too short for the image dimensions
        UnsupportedConfigurationError: If the color model or bit depth cannot be rebuilt
    """
    color_model = decide_color_model(descriptor, alpha is not None)

    reconstructor = RECONSTRUCTORS.get(color_model)
    if reconstructor is None:
        raise UnsupportedConfigurationError(
            f"Unknown color model {color_model!r}",
            descriptor.display_name,
            descriptor.identity,
        )

    samples = reconstructor(descriptor, color, alpha, alpha_bits)
    logger.debug(
        f"Rebuilt {descriptor.display_name} as {color_model.name} "
        f"({descriptor.width}x{descriptor.height}, {len(samples)} bytes)"
    )
    return PixelBuffer(
        color_model=color_model,
        width=descriptor.width,
        height=descriptor.height,
        samples=samples,
    )


def encode_png(buffer: PixelBuffer) -> bytes:
    """
    Serialize a pixel buffer as PNG.

    Args:
        buffer: Pixel buffer to encode

    Returns:
        PNG file contents
    """
    image = Image.frombytes(
        buffer.color_model.pil_mode, (buffer.width, buffer.height), buffer.samples
    )
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


def recover_image(
    descriptor: ImageDescriptor, alpha_layer: Optional[ImageDescriptor] = None
) -> ReconstructedImage:
    """
    Recover the output file contents of one image.

    JPEG streams are returned unchanged and their soft mask is ignored.
    Everything else is inflated, rebuilt together with the soft mask and
    encoded as PNG.

    Args:
        descriptor: Descriptor of a non-mask image
        alpha_layer: Descriptor of its soft mask, if it has one

    Returns:
        ReconstructedImage with the output bytes and extension
    """
    if descriptor.is_jpeg:
        return ReconstructedImage(ext=descriptor.compression.extension, image=descriptor.raw_data)

    alpha = None
    alpha_bits = 8
    if alpha_layer is not None:
        if alpha_layer.identity != descriptor.mask_identity:
            raise MalformedDocumentError(
                f"Soft mask xref {alpha_layer.identity} is not linked to this image",
                descriptor.display_name,
                descriptor.identity,
            )
        if (alpha_layer.width, alpha_layer.height) != (descriptor.width, descriptor.height):
            logger.warning(
                f"Soft mask {alpha_layer.display_name} is {alpha_layer.width}x{alpha_layer.height}, "
                f"image {descriptor.display_name} is {descriptor.width}x{descriptor.height}"
            )
        alpha = inflate_stream(alpha_layer)
        alpha_bits = alpha_layer.bits_per_component

    color = inflate_stream(descriptor)
    buffer = reconstruct_pixels(descriptor, color, alpha, alpha_bits)

    return ReconstructedImage(
        ext=descriptor.compression.extension,
        color_model=buffer.color_model,
        image=encode_png(buffer),
    )
