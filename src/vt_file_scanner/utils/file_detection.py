"""Content-type detection for multipart uploads.

Guesses from the filename with stdlib mimetypes first, then falls back to
sniffing a few well-known magic numbers.
"""

from __future__ import annotations

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# (prefix, MIME type), checked in order
MAGIC_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),  # also docx, xlsx, jar, apk
    (b"MZ", "application/x-dosexec"),
    (b"\x7fELF", "application/x-elf"),
    (b"\x1f\x8b", "application/gzip"),
    (b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
)


def detect_mime_type(content: bytes, filename: str = "") -> str:
    """Detect the MIME type to declare for an uploaded file.

    Args:
        content: File bytes (only the first few are inspected).
        filename: Filename used for the extension-based guess.

    Returns:
        MIME type string, ``application/octet-stream`` when unknown.
    """
    if filename:
        mime, _ = mimetypes.guess_type(filename)
        if mime:
            return mime
    return sniff_magic_bytes(content)


def sniff_magic_bytes(data: bytes) -> str:
    for signature, mime in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return mime
    return DEFAULT_CONTENT_TYPE
