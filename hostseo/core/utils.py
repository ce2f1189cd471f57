"""Utility functions for URL and text processing."""

from __future__ import annotations

import re
from bs4 import BeautifulSoup


def competitor_name_from_url(url: str) -> str:
    """Derive a short competitor name from a feed URL.

    Drops the scheme, a leading ``www.`` and everything from the first dot
    onwards, then title-cases what is left with dashes and underscores read
    as spaces. ``https://www.godaddy.com/blog/rss/`` becomes ``Godaddy``.
    """
    if not url:
        return ""

    name = re.sub(r"^https?://", "", url.strip(), flags=re.IGNORECASE)
    name = re.sub(r"^www\.", "", name, flags=re.IGNORECASE)
    name = re.sub(r"\..*$", "", name, flags=re.DOTALL)
    name = name.replace("-", " ").replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def strip_markup(text: str) -> str:
    """Remove HTML tags, including script and style contents."""
    if not text:
        return ""
    if "<" not in text:
        return text.strip()

    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text().strip()


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with a single space."""
    return re.sub(r"\s+", " ", text or "").strip()
