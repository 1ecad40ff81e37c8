"""Text extraction for uploaded research papers (PDF or plain text)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, Iterable, Optional, Tuple

import fitz  # PyMuPDF

from ..analysis.normalize import strip_layout_noise
from ..errors import (
    DocumentTooLargeError,
    EmptyDocumentError,
    UnreadableDocumentError,
    UnsupportedDocumentTypeError,
)

LOGGER = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
TEXT_MIME = "text/plain"
PRINTABLE_ASCII = re.compile(r"^[\x20-\x7E\s]*$")


@dataclass(slots=True)
class ExtractedDocument:
    """Raw document text plus the metadata reported back to clients."""

    filename: str
    size: int
    media_type: str
    source: str
    text: str
    pages: int
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def word_count(self) -> int:
        return count_words(self.text)

    @property
    def character_count(self) -> int:
        return len(self.text)


def file_extension(filename: Optional[str]) -> str:
    if not filename:
        return ""
    return PurePath(filename).suffix.lower()


def detect_file_type(data: bytes, filename: Optional[str] = None) -> Tuple[str, str]:
    """Return ``(type, confidence)`` sniffed from the leading bytes."""

    if not data:
        return "unknown", "low"
    header = data[:20].decode("ascii", errors="replace")
    lowered = header.lower()
    extension = file_extension(filename)
    if header.startswith("%PDF"):
        return "pdf", "high"
    if "<html" in lowered or "<!doctype" in lowered:
        return "html", "high"
    if extension == ".txt" or PRINTABLE_ASCII.match(header):
        return "text", "high" if extension == ".txt" else "medium"
    return "unknown", "low"


def validate_upload(
    data: bytes,
    filename: str,
    content_type: Optional[str],
    *,
    max_size: int,
    allowed_mime_types: Iterable[str],
    allowed_extensions: Iterable[str],
) -> str:
    """Check size, declared type and extension; return the effective media type."""

    if not data:
        raise UnreadableDocumentError("Empty file received")
    if len(data) > max_size:
        raise DocumentTooLargeError(
            f"File too large. Maximum size is {format_file_size(max_size)}"
        )

    media_type = (content_type or "").split(";")[0].strip().lower()
    extension = file_extension(filename)
    detected, _ = detect_file_type(data, filename)

    if media_type == PDF_MIME and detected != "pdf":
        if detected == "html":
            raise UnreadableDocumentError(
                "File appears to be HTML, not a PDF. Please upload a valid PDF file."
            )
        raise UnreadableDocumentError(
            f"File type suggests PDF but content appears to be {detected}. "
            "Please upload a valid PDF file."
        )

    allowed_mime = {item.lower() for item in allowed_mime_types}
    allowed_ext = {item.lower() for item in allowed_extensions}
    if media_type not in allowed_mime:
        # Browsers often send .txt files as application/octet-stream.
        if extension == ".txt" and ".txt" in allowed_ext:
            media_type = TEXT_MIME
        else:
            raise UnsupportedDocumentTypeError(
                f"Unsupported file type: {media_type or 'unknown'}. "
                f"Allowed types: {', '.join(sorted(allowed_mime))}"
            )
    if extension not in allowed_ext:
        raise UnsupportedDocumentTypeError(
            f"Unsupported file extension: {extension or 'none'}. "
            f"Allowed extensions: {', '.join(sorted(allowed_ext))}"
        )
    return media_type


def extract_pdf_text(data: bytes) -> Tuple[str, int, Dict[str, Any]]:
    """Return ``(text, page_count, metadata)`` for a PDF byte buffer."""

    if not data.startswith(b"%PDF"):
        if data[:100].decode("utf-8", errors="ignore").strip().startswith("<"):
            raise UnreadableDocumentError(
                "Received HTML content instead of PDF. Please ensure you are uploading a valid PDF file."
            )
        raise UnreadableDocumentError('Invalid PDF format. Expected a file starting with "%PDF".')

    try:
        document = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise UnreadableDocumentError(
            "Failed to parse PDF. The file might be corrupted or password-protected."
        ) from exc

    with document:
        if document.needs_pass:
            raise UnreadableDocumentError("PDF is password-protected.")
        parts = [page.get_text("text") for page in document]
        metadata = {key: value for key, value in (document.metadata or {}).items() if value}
        pages = document.page_count

    text = strip_layout_noise("\n".join(parts))
    if not text.strip():
        raise EmptyDocumentError(
            "No readable text found in PDF. The document might be image-based or corrupted."
        )
    return text, pages, metadata


def extract_plain_text(data: bytes) -> str:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnreadableDocumentError(
            "Failed to read text file. Please check the file encoding."
        ) from exc
    if not text.strip():
        raise EmptyDocumentError("No readable text found in file.")
    return text


def extract_document(
    data: bytes,
    filename: str,
    content_type: Optional[str],
    *,
    max_size: int,
    allowed_mime_types: Iterable[str],
    allowed_extensions: Iterable[str],
) -> ExtractedDocument:
    """Validate an upload and extract its raw text."""

    media_type = validate_upload(
        data,
        filename,
        content_type,
        max_size=max_size,
        allowed_mime_types=allowed_mime_types,
        allowed_extensions=allowed_extensions,
    )
    LOGGER.debug(
        "Processing file %s (media_type=%s, size=%d bytes)", filename, media_type, len(data)
    )
    if media_type == PDF_MIME:
        text, pages, info = extract_pdf_text(data)
        source = "pdf"
    else:
        text = extract_plain_text(data)
        pages, info, source = 1, {"title": "Text Document"}, "text"

    LOGGER.info("Extracted %d characters from %s", len(text), filename)
    return ExtractedDocument(
        filename=filename,
        size=len(data),
        media_type=media_type,
        source=source,
        text=text,
        pages=pages,
        info=info,
    )


def count_words(text: Optional[str]) -> int:
    if not text or not isinstance(text, str):
        return 0
    return len(text.split())


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``10 MB``."""

    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    while size >= 1024 ** (index + 1) and index < len(units) - 1:
        index += 1
    value = round(size / (1024 ** index), 2)
    return f"{value:g} {units[index]}"


__all__ = [
    "ExtractedDocument",
    "count_words",
    "detect_file_type",
    "extract_document",
    "extract_pdf_text",
    "extract_plain_text",
    "format_file_size",
    "validate_upload",
]
