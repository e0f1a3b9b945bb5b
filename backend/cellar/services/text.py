"""
Text helpers shared by the candidate ranker and the encyclopedia client.

Every comparison between a user's guess and search-result text goes through
normalize() on both sides, so matching is never case- or punctuation-sensitive.
"""

import re
from typing import Optional

# Keep a-z, digits, Latin-1 letters (à-ö, ø-ÿ), whitespace, hyphen, apostrophe
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9à-öø-ÿ\s\-']")
_MULTI_SPACE = re.compile(r"\s{2,}")
_SPAN_TAG = re.compile(r"</?span[^>]*>")
_ANY_TAG = re.compile(r"</?[^>]+>")
_VINTAGE = re.compile(r"\b(19\d{2}|20\d{2})\b")


def normalize(s: Optional[str]) -> str:
    """
    Normalize text for substring comparison.

    Lowercases, decodes &amp;, replaces punctuation (except - and ') with
    spaces, collapses whitespace runs and trims. Idempotent.
    """
    text = (s or "").lower().replace("&amp;", "&")
    text = _DISALLOWED_CHARS.sub(" ", text)
    text = _MULTI_SPACE.sub(" ", text)
    return text.strip()


def strip_html(s: Optional[str]) -> str:
    """Remove markup from a search snippet and decode the common entities."""
    text = _SPAN_TAG.sub("", s or "")
    text = _ANY_TAG.sub("", text)
    text = text.replace("&quot;", '"').replace("&amp;", "&").replace("&#39;", "'")
    return text.strip()


def find_vintage(text: Optional[str]) -> Optional[int]:
    """Return the first 19xx/20xx year in text, or None."""
    m = _VINTAGE.search(str(text or ""))
    if not m:
        return None
    return int(m.group(1))
