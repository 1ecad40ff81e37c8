from __future__ import annotations

import fitz
import pytest

from sumx.errors import (
    DocumentTooLargeError,
    EmptyDocumentError,
    UnreadableDocumentError,
    UnsupportedDocumentTypeError,
)
from sumx.services.document_text import (
    count_words,
    detect_file_type,
    extract_document,
    extract_pdf_text,
    extract_plain_text,
    format_file_size,
    validate_upload,
)

LIMITS = {
    "max_size": 1024 * 1024,
    "allowed_mime_types": ["application/pdf", "text/plain"],
    "allowed_extensions": [".pdf", ".txt"],
}


def _pdf_bytes(*pages: str) -> bytes:
    document = fitz.open()
    for text in pages:
        page = document.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


def test_detect_file_type() -> None:
    assert detect_file_type(b"%PDF-1.7\n...", "paper.pdf") == ("pdf", "high")
    assert detect_file_type(b"<!DOCTYPE html><html>", "paper.pdf")[0] == "html"
    assert detect_file_type(b"plain words", "notes.txt") == ("text", "high")
    assert detect_file_type(b"plain words", "notes") == ("text", "medium")
    assert detect_file_type(b"\x00\xff\xfe\x01binary", "blob.bin") == ("unknown", "low")
    assert detect_file_type(b"", "empty.txt") == ("unknown", "low")


def test_validate_upload_rejects_empty_and_large() -> None:
    with pytest.raises(UnreadableDocumentError):
        validate_upload(b"", "paper.pdf", "application/pdf", **LIMITS)
    with pytest.raises(DocumentTooLargeError, match="1 MB"):
        validate_upload(b"x" * (1024 * 1024 + 1), "paper.txt", "text/plain", **LIMITS)


def test_validate_upload_rejects_mislabelled_pdf() -> None:
    with pytest.raises(UnreadableDocumentError, match="HTML"):
        validate_upload(b"<html><body>login</body></html>", "paper.pdf", "application/pdf", **LIMITS)


def test_validate_upload_rejects_unsupported_types() -> None:
    with pytest.raises(UnsupportedDocumentTypeError):
        validate_upload(b"PK\x03\x04", "paper.docx", "application/msword", **LIMITS)
    with pytest.raises(UnsupportedDocumentTypeError, match="extension"):
        validate_upload(b"plain text", "paper.md", "text/plain", **LIMITS)


def test_validate_upload_accepts_octet_stream_txt() -> None:
    media_type = validate_upload(b"plain text", "notes.txt", "application/octet-stream", **LIMITS)
    assert media_type == "text/plain"


def test_extract_pdf_text_reads_pages() -> None:
    text, pages, _ = extract_pdf_text(_pdf_bytes("First page sentence.", "Second page sentence."))
    assert pages == 2
    assert "First page sentence." in text
    assert "Second page sentence." in text


def test_extract_pdf_without_text_is_empty() -> None:
    with pytest.raises(EmptyDocumentError):
        extract_pdf_text(_pdf_bytes(""))


def test_extract_pdf_rejects_non_pdf_bytes() -> None:
    with pytest.raises(UnreadableDocumentError, match="HTML"):
        extract_pdf_text(b"<html></html>")
    with pytest.raises(UnreadableDocumentError, match="%PDF"):
        extract_pdf_text(b"GIF89a")


def test_extract_plain_text() -> None:
    assert extract_plain_text("Hello paper".encode("utf-8-sig")) == "Hello paper"
    with pytest.raises(UnreadableDocumentError):
        extract_plain_text(b"\xff\xfe\xfa")
    with pytest.raises(EmptyDocumentError):
        extract_plain_text(b"   \n")


def test_extract_document_pdf_and_text() -> None:
    pdf = extract_document(_pdf_bytes("Methods and results."), "paper.pdf", "application/pdf", **LIMITS)
    assert pdf.source == "pdf"
    assert pdf.pages == 1
    assert pdf.media_type == "application/pdf"
    assert "Methods and results." in pdf.text

    text = extract_document(b"A short abstract.", "abstract.txt", "text/plain", **LIMITS)
    assert text.source == "text"
    assert text.pages == 1
    assert text.word_count == 3
    assert text.character_count == len("A short abstract.")


def test_count_words() -> None:
    assert count_words("") == 0
    assert count_words(None) == 0
    assert count_words("  one two\nthree\tfour ") == 4


def test_format_file_size() -> None:
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"


def test_extract_pdf_rejects_corrupt_bytes() -> None:
    with pytest.raises(UnreadableDocumentError, match="Failed to parse PDF"):
        extract_pdf_text(b"%PDF-1.4\n garbage")


def test_extract_pdf_rejects_password_protected() -> None:
    document = fitz.open()
    document.new_page().insert_text((72, 72), "Locked methods section.")
    data = document.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner-secret", user_pw="reader-secret"
    )
    document.close()

    with pytest.raises(UnreadableDocumentError, match="password-protected"):
        extract_pdf_text(data)
