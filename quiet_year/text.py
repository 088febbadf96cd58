"""Slug and collation helpers shared by storage and the tree views."""

import re
import unicodedata


def slugify(value: str, fallback: str = "untitled") -> str:
    """Convert a title to a filesystem-safe slug.

    "The Quiet Year" → "the-quiet-year"
    """
    text = unicodedata.normalize("NFKD", value)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or fallback


def collation_key(value: str) -> tuple[str, str, str]:
    """Sort key approximating locale-aware ascending comparison.

    Accents and case are ignored at the first level, so "élan" sorts beside
    "Elm". Ties fall back to case-folded text, then to case with lowercase
    first ("apple" before "Apple").
    """
    folded = value.casefold()
    base = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in base if not unicodedata.combining(ch))
    return base, folded, value.swapcase()
