from __future__ import annotations

import html
import re

HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
CITATION_PATTERN = re.compile(r"\[(?:\d+|citation needed|note \d+)\]", re.IGNORECASE)
PAREN_PRONUNCIATION_PATTERN = re.compile(r"\(\s*[;,]?\s*\)")
MULTI_SPACE_PATTERN = re.compile(r"\s+")


def clean_snippet(snippet: str) -> str:
    """Turn a MediaWiki search snippet (HTML highlighted) into plain text."""
    if not snippet:
        return ""
    text = HTML_TAG_PATTERN.sub("", snippet)
    text = html.unescape(text)
    return MULTI_SPACE_PATTERN.sub(" ", text).strip()


def normalise_extract(text: str) -> str:
    """Drop citation markers and empty parentheses left in summary extracts."""
    if not text:
        return ""
    cleaned = CITATION_PATTERN.sub("", text)
    cleaned = PAREN_PRONUNCIATION_PATTERN.sub("", cleaned)
    cleaned = MULTI_SPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip()
