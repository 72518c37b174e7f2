"""
PDF document utilities.

Thin wrappers around PyMuPDF's low-level xref API. Every lookup tolerates
absent keys and returns None instead of raising.
"""

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
from pymupdf import Document, open as pdfopen

logger = logging.getLogger(__name__)

NULL_ENTRY: Tuple[str, str] = ("null", "null")

_REFERENCE_PATTERN = re.compile(r"^\s*(\d+)\s+\d+\s+R\s*$")
_NAME_PATTERN = re.compile(r"/([^\s/\[\]<>()]+)")


def open_document(pdf_path: Path, file_contents: Optional[bytes] = None) -> Document:
    """
    Open a PDF from its contents if given, otherwise from disk.

    Args:
        pdf_path: Path to the PDF file
        file_contents: Raw PDF bytes, used instead of reading pdf_path

    Returns:
        Opened PDF document
    """
    if file_contents:
        return pdfopen(stream=file_contents, filetype="pdf")
    return pdfopen(str(pdf_path))


def get_object_count(doc: Document) -> int:
    """
    Get the number of entries in the cross-reference table.

    Args:
        doc: PDF document object

    Returns:
        Number of xref entries, including the free entry 0
    """
    return doc.xref_length()


def iter_stream_objects(doc: Document) -> Iterator[Tuple[int, int]]:
    """
    Yield (position, xref) for every stream object in document order.

    The position counts all objects, streams or not, starting at 1.
    """
    for position, xref in enumerate(range(1, get_object_count(doc)), start=1):
        if doc.xref_is_stream(xref):
            yield position, xref


def lookup_key(doc: Document, xref: int, key: str) -> Tuple[str, str]:
    """
    Look up a key of an object's dictionary.

    Args:
        doc: PDF document object
        xref: Cross-reference number of the object
        key: Dictionary key without the leading slash

    Returns:
        (type, value) as reported by PyMuPDF, ("null", "null") if absent
    """
    entry = doc.xref_get_key(xref, key)
    if not entry:
        return NULL_ENTRY
    return entry


def parse_reference(value: str) -> Optional[int]:
    """Parse an indirect reference such as '12 0 R' into its object number."""
    match = _REFERENCE_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1))


def _resolve(doc: Document, entry: Tuple[str, str]) -> str:
    # Dereference one level of indirection; PyMuPDF reports the target as text.
    kind, value = entry
    if kind == "xref":
        target = parse_reference(value)
        if target is not None:
            return doc.xref_object(target, compressed=True).strip()
    return value


def get_reference(doc: Document, xref: int, key: str) -> Optional[int]:
    """Get the object number an indirect reference key points to."""
    kind, value = lookup_key(doc, xref, key)
    if kind != "xref":
        return None
    return parse_reference(value)


def get_name(doc: Document, xref: int, key: str) -> Optional[str]:
    """Get a name value without its leading slash, resolving indirect objects."""
    entry = lookup_key(doc, xref, key)
    if entry[0] not in ("name", "xref"):
        return None
    value = _resolve(doc, entry)
    if not value.startswith("/"):
        return None
    return value[1:]


def get_int(doc: Document, xref: int, key: str) -> Optional[int]:
    """Get an integer value, resolving indirect objects."""
    entry = lookup_key(doc, xref, key)
    if entry[0] not in ("int", "float", "xref"):
        return None
    value = _resolve(doc, entry)
    try:
        return int(float(value))
    except ValueError:
        logger.debug(f"Non-numeric /{key} on xref {xref}: {value!r}")
        return None


def get_bool(doc: Document, xref: int, key: str) -> bool:
    """Get a boolean value; absent keys are False."""
    kind, value = lookup_key(doc, xref, key)
    return kind == "bool" and value == "true"


def get_filter_names(doc: Document, xref: int) -> List[str]:
    """
    Get the stream filters of an object.

    Args:
        doc: PDF document object
        xref: Cross-reference number of the stream object

    Returns:
        Filter names without leading slashes, empty if the stream is unfiltered
    """
    entry = lookup_key(doc, xref, "Filter")
    if entry[0] == "null":
        return []
    return _NAME_PATTERN.findall(_resolve(doc, entry))


def get_raw_stream(doc: Document, xref: int) -> bytes:
    """Get the stream bytes of an object exactly as stored, filters not applied."""
    return doc.xref_stream_raw(xref) or b""
