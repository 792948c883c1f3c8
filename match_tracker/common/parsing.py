import re
from typing import Iterable

from bs4 import BeautifulSoup


def clean_text(s: str | None) -> str | None:
    if s is None:
        return None
    s = re.sub(r"\s+", " ", s.strip())
    return s or None


def soup_from_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def contains_any(text: str | None, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test of *text* against any of *keywords*."""
    if not text:
        return False
    folded = text.casefold()
    return any(k.casefold() in folded for k in keywords if k)


def first_group(patterns: Iterable[re.Pattern], value: str | None) -> str | None:
    """Return group 1 of the first pattern that matches *value*."""
    if not value:
        return None
    for pattern in patterns:
        m = pattern.search(value)
        if m:
            return m.group(1)
    return None
