"""Small text helpers shared by the integrations and the normalizer."""

import re

_WORD_RE = re.compile(r"\b[\w'-]+\b")


def ensure_scheme(url: str) -> str:
    """Prefix https:// when a URL has no http(s) scheme."""
    url = (url or "").strip()
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def normalize_domain(url: str) -> str:
    """Lowercase host without protocol, www. or trailing slash."""
    normalized = (url or "").lower().strip()
    normalized = normalized.replace("https://", "").replace("http://", "")
    normalized = normalized.replace("www.", "", 1)
    return normalized.split("/", 1)[0]


def count_words(text: str) -> int:
    """Count words in plain or markdown text."""
    if not text:
        return 0
    # Drop markdown heading/emphasis markers so they don't count as words
    cleaned = re.sub(r"[#*_>`]+", " ", text)
    return len(_WORD_RE.findall(cleaned))
