"""
Composite slug helpers.

A composite slug is `category` for a top-level category and `category/child`
for a child. Depth is fixed at one level, so the first `/` is the only
separator that carries meaning.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

SLUG_SEPARATOR = "/"
LIST_SEPARATOR = ","


def normalize_slug(slug: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    if not isinstance(slug, str):
        raise TypeError(f"Slug must be a string, got {type(slug)!r}")
    return slug.strip().lower()


def split_slug(slug: str) -> Tuple[str, Optional[str]]:
    """
    Split a composite slug into (parent part, child part or None).

    Everything after the first separator is the child part, so a slug with
    more than one separator keeps its extra segments there (and will not
    resolve).
    """
    normalized = normalize_slug(slug)
    if SLUG_SEPARATOR not in normalized:
        return normalized, None
    parent, child = normalized.split(SLUG_SEPARATOR, 1)
    return parent, child


def join_slug(parent: str, child: Optional[str] = None) -> str:
    if child is None:
        return parent
    return f"{parent}{SLUG_SEPARATOR}{child}"


def is_top_level_slug(slug: str) -> bool:
    return split_slug(slug)[1] is None


def is_descendant_slug(candidate: str, ancestor: str) -> bool:
    """True when `candidate` sits under `ancestor` (`ancestor/...`)."""
    return normalize_slug(candidate).startswith(normalize_slug(ancestor) + SLUG_SEPARATOR)


def format_slug_fallback(slug: str) -> str:
    """
    Human-readable label for a slug that does not resolve.

    Takes the last path segment and title-cases its underscore-separated words:
    "technology/quantum_computing" -> "Quantum Computing".
    """
    last_part = slug.strip().split(SLUG_SEPARATOR)[-1]
    return " ".join(word[:1].upper() + word[1:] for word in last_part.split("_"))


def parse_slug_list(value: Any) -> List[str]:
    """
    Parse a slug list from a query parameter value.

    Accepts a comma-separated string, or an iterable of such strings (repeated
    parameters). Blank entries are dropped; order is preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw_items: Iterable[str] = value.split(LIST_SEPARATOR)
    else:
        raw_items = [part for item in value for part in str(item).split(LIST_SEPARATOR)]
    return [item.strip() for item in raw_items if item.strip()]


def serialize_slug_list(slugs: Iterable[str]) -> str:
    return LIST_SEPARATOR.join(slug.strip() for slug in slugs if slug and slug.strip())
