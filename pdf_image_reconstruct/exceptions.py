"""
Error types raised while building descriptors and reconstructing images.
"""

from typing import Optional


class ImageExtractionError(Exception):
    """Base error carrying the location of the offending image object."""

    def __init__(
        self,
        message: str,
        display_name: Optional[str] = None,
        identity: Optional[int] = None,
    ):
        self.display_name = display_name
        self.identity = identity
        if display_name is not None or identity is not None:
            message = f"{message} [image {display_name or '?'}, xref {identity if identity is not None else '?'}]"
        super().__init__(message)


class MalformedDocumentError(ImageExtractionError):
    """The document's image objects are inconsistent; the run is aborted."""
    pass


class UnsupportedConfigurationError(ImageExtractionError):
    """A color model / bit depth combination the engine cannot rebuild."""
    pass


class DataBoundsError(ImageExtractionError):
    """A color or mask stream is shorter than the image dimensions require."""
    pass


class StreamDecodeError(ImageExtractionError):
    """A stream tagged as inflatable could not be inflated."""
    pass
