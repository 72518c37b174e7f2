"""
Data models for PDF image reconstruction.
"""

from enum import Enum, IntEnum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator


class ColorSpace(str, Enum):
    """Declared color space of an image object."""

    DEVICE_GRAY = "DeviceGray"
    DEVICE_RGB = "DeviceRGB"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "ColorSpace":
        """Map a PDF color space name (without the leading slash) to a tag."""
        if name == cls.DEVICE_GRAY.value:
            return cls.DEVICE_GRAY
        if name == cls.DEVICE_RGB.value:
            return cls.DEVICE_RGB
        return cls.OTHER


class Compression(str, Enum):
    """How the raw stream of an image is stored."""

    FLATE = "flate"
    JPEG = "jpeg"

    @property
    def extension(self) -> str:
        """File extension of the output produced for this compression."""
        return "jpg" if self is Compression.JPEG else "png"


class ColorModel(IntEnum):
    """Channel composition of a reconstructed pixel buffer (PNG color types)."""

    GRAYSCALE = 0
    RGB = 2
    GRAYSCALE_ALPHA = 4
    RGB_ALPHA = 6

    @property
    def components_per_pixel(self) -> int:
        return _COMPONENTS_PER_PIXEL[self]

    @property
    def has_alpha(self) -> bool:
        return self in (ColorModel.GRAYSCALE_ALPHA, ColorModel.RGB_ALPHA)

    @property
    def pil_mode(self) -> str:
        """Pillow image mode holding the same channels."""
        return _PIL_MODES[self]


_COMPONENTS_PER_PIXEL = {
    ColorModel.GRAYSCALE: 1,
    ColorModel.GRAYSCALE_ALPHA: 2,
    ColorModel.RGB: 3,
    ColorModel.RGB_ALPHA: 4,
}

_PIL_MODES = {
    ColorModel.GRAYSCALE: "L",
    ColorModel.GRAYSCALE_ALPHA: "LA",
    ColorModel.RGB: "RGB",
    ColorModel.RGB_ALPHA: "RGBA",
}


class ImageDescriptor(BaseModel):
    """Fully resolved attributes and raw bytes of one image object."""

    identity: int = Field(..., description="Cross-reference number of the image object")
    mask_identity: Optional[int] = Field(
        default=None, description="Cross-reference number of the linked soft mask"
    )
    color_space: ColorSpace = Field(..., description="Declared color space tag")
    color_space_label: str = Field(
        default="", description="Declared color space as written in the document"
    )
    width: int = Field(..., gt=0, description="Width of the image in pixels")
    height: int = Field(..., gt=0, description="Height of the image in pixels")
    bits_per_component: int = Field(..., gt=0, description="Bits per component")
    compression: Compression = Field(..., description="Storage of the raw stream")
    filter_name: str = Field(default="", description="Declared stream filter")
    display_name: str = Field(..., description="Name of the image or a positional placeholder")
    raw_data: bytes = Field(..., description="Stream bytes as stored in the document")
    is_alpha_layer: bool = Field(
        default=False, description="True if another image uses this one as its soft mask"
    )

    @property
    def has_alpha_layer(self) -> bool:
        """Check if the image is linked to a soft mask."""
        return self.mask_identity is not None

    @property
    def is_jpeg(self) -> bool:
        return self.compression is Compression.JPEG

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


class PixelBuffer(BaseModel):
    """8-bit-per-component pixels ready for serialization."""

    color_model: ColorModel
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    samples: bytes

    @property
    def components_per_pixel(self) -> int:
        return self.color_model.components_per_pixel

    @model_validator(mode="after")
    def validate_sample_count(self):
        expected = self.width * self.height * self.components_per_pixel
        if len(self.samples) != expected:
            raise ValueError(
                f"Expected {expected} samples for {self.width}x{self.height} "
                f"{self.color_model.name}, got {len(self.samples)}"
            )
        return self


class ReconstructedImage(BaseModel):
    """Output bytes of one reconstructed image."""

    ext: str = Field(..., description="File extension")
    color_model: Optional[ColorModel] = Field(
        default=None, description="Color model of the rebuilt pixels (None for passthrough)"
    )
    image: bytes = Field(..., description="Binary image data")


class ExtractionConfig(BaseModel):
    """Configuration for image extraction."""

    output_dir: str = Field(default="images", description="Output directory name")
    filename_prefix: str = Field(default="out", description="Prefix of output file names")
    clear_output_dir: bool = Field(
        default=True, description="Remove images left over from a previous run"
    )
    skip_failed_images: bool = Field(
        default=False, description="Log and skip images whose data cannot be rebuilt"
    )
    showcase_path: Optional[str] = Field(
        default=None, description="Write a copy of the PDF with all images on an extra page"
    )
    showcase_page_size: Tuple[float, float] = Field(
        default=(700.0, 700.0), description="Width and height of the showcase page"
    )

    @field_validator("filename_prefix")
    @classmethod
    def validate_filename_prefix(cls, v):
        if not v:
            raise ValueError("filename_prefix must not be empty")
        if "/" in v or "\\" in v:
            raise ValueError("filename_prefix must not contain path separators")
        return v

    @field_validator("showcase_page_size")
    @classmethod
    def validate_page_size(cls, v):
        if v[0] <= 0 or v[1] <= 0:
            raise ValueError("showcase_page_size must be positive")
        return v


class ExtractionResult(BaseModel):
    """Result of extracting the images of one PDF."""

    pdf_path: str
    images_found: int
    alpha_layers: int
    images_extracted: int
    failed_images: List[str] = Field(default_factory=list)
    extracted_files: List[str] = Field(default_factory=list)
    output_directory: str
    showcase_pdf: Optional[str] = None
    extraction_time: float
