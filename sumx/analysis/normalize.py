"""Cleanup rules for PDF/OCR text before it is sent to a model."""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

# Ordered; later rules assume the earlier ones already ran.
_RULES: List[Tuple[re.Pattern, str]] = [
    # OCR word merges
    (re.compile(r"([a-z])([A-Z])"), r"\1 \2"),
    (re.compile(r"(\d)([A-Za-z])"), r"\1 \2"),
    (re.compile(r"([A-Za-z])(\d)"), r"\1 \2"),
    # line breaks and spacing
    (re.compile(r"\n\s*\n\s*\n"), "\n\n"),
    (re.compile(r"\r\n"), "\n"),
    (re.compile(r"\t"), " "),
    (re.compile(r" {3,}"), "  "),
    # wrapped words
    (re.compile(r"(\w)- +(?=\w|\n)"), r"\1"),
    (re.compile(r"(\w)-\n(\w)"), r"\1\2"),
    (re.compile(r"\n(\w)"), r" \1"),
    # punctuation spacing
    (re.compile(r"([.!?])\s*([A-Z])"), r"\1 \2"),
    (re.compile(r"([,;:])\s*(\w)"), r"\1 \2"),
    # citations
    (re.compile(r"\[\s*(\d+)\s*\]"), r"[\1]"),
    (re.compile(r"\(\s*(\d{4})\s*\)"), r"(\1)"),
]

WHITESPACE = re.compile(r"\s+")
PAGE_NUMBER_LINE = re.compile(r"^[ \t]*\d+[ \t]*$", re.MULTILINE)
PAGE_LABEL_LINE = re.compile(r"^[ \t]*Page \d+.*$", re.MULTILINE)


def _apply_rules(text: str) -> str:
    for pattern, replacement in _RULES:
        text = pattern.sub(replacement, text)
    return WHITESPACE.sub(" ", text.strip())


def normalize_paper_text(raw: Optional[str]) -> str:
    """Return cleaned text suitable for prompting.

    The rule pass is repeated until the text stops changing, so the result is
    a fixed point and ``normalize_paper_text`` is idempotent. Every rule either
    inserts a single space between two non-space characters or deletes
    characters, which bounds the number of passes.
    """

    if not raw:
        return ""
    previous = None
    text = raw
    while text != previous:
        previous = text
        text = _apply_rules(text)
    return text


def strip_layout_noise(text: str) -> str:
    """Drop lines that only carry a page number or a ``Page N`` running label."""

    if not text:
        return ""
    text = PAGE_LABEL_LINE.sub("", text)
    return PAGE_NUMBER_LINE.sub("", text)


__all__ = ["normalize_paper_text", "strip_layout_noise"]
