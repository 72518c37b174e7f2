import zlib
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

# Objects 1-3 are the catalog, page tree and page; extra streams start at 4
FIRST_STREAM_XREF = 4


def make_image_entries(
    width: int,
    height: int,
    colorspace: Optional[str] = "/DeviceRGB",
    bpc: int = 8,
    filter_name: str = "/FlateDecode",
    smask: Optional[int] = None,
    name: Optional[str] = None,
) -> str:
    """Dictionary entries of an image XObject, without /Length."""
    entries = [
        "/Type /XObject",
        "/Subtype /Image",
        f"/Width {width}",
        f"/Height {height}",
        f"/BitsPerComponent {bpc}",
        f"/Filter {filter_name}",
    ]
    if colorspace:
        entries.append(f"/ColorSpace {colorspace}")
    if smask is not None:
        entries.append(f"/SMask {smask} 0 R")
    if name:
        entries.append(f"/Name /{name}")
    return " ".join(entries)


def build_pdf(streams: List[Tuple[str, bytes]]) -> bytes:
    """
    Assemble a one-page PDF holding the given stream objects.

    Each stream is (dictionary entries, raw data) and gets object number
    FIRST_STREAM_XREF + its index.
    """
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 200 200] /Resources << >> >>",
    ]
    for entries, data in streams:
        objects.append(
            f"<< {entries} /Length {len(data)} >>\nstream\n".encode("ascii")
            + data
            + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("ascii")
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")
    return bytes(out)


@pytest.fixture
def write_pdf(tmp_path: Path):
    """Return a function writing a test PDF into the temporary directory."""

    def _write(streams: List[Tuple[str, bytes]], filename: str = "test.pdf") -> Path:
        pdf_path = tmp_path / filename
        pdf_path.write_bytes(build_pdf(streams))
        return pdf_path

    return _write


@pytest.fixture
def sample_streams() -> List[Tuple[str, bytes]]:
    """
    RGB image with a soft mask, its mask, a 1-bit gray image and a JPEG.

    Object numbers: 4 = RGB (mask 5), 5 = mask, 6 = gray, 7 = JPEG.
    """
    return [
        (
            make_image_entries(2, 1, smask=5, name="Im1"),
            zlib.compress(bytes([10, 20, 30, 40, 50, 60])),
        ),
        (
            make_image_entries(2, 1, colorspace="/DeviceGray"),
            zlib.compress(bytes([99, 200])),
        ),
        (
            make_image_entries(8, 1, colorspace="/DeviceGray", bpc=1),
            zlib.compress(bytes([0b10110010])),
        ),
        (
            make_image_entries(1, 1, filter_name="/DCTDecode"),
            b"\xff\xd8\xff\xe0fake-jpeg-payload\xff\xd9",
        ),
    ]


@pytest.fixture
def image_entries():
    """Return the image dictionary builder."""
    return make_image_entries
