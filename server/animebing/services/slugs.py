"""Identifier helpers: ObjectId-shaped ids and title-derived slugs."""

import re
import secrets

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_SLUG_UNSAFE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def is_object_id(value: str) -> bool:
    """True when ``value`` is exactly 24 lowercase hex characters."""
    return bool(value) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def new_object_id() -> str:
    """Generate a fresh 24-hex-char document id."""
    return secrets.token_hex(12)


def derive_slug(title: str, strip: bool = False) -> str:
    """Lowercase ``title`` and collapse every non-alphanumeric run to one hyphen.

    ``strip=True`` also trims leading/trailing hyphens, which is the form
    used when linking from catalog cards.
    """
    slug = _NON_ALNUM_RUN.sub("-", (title or "").lower())
    if strip:
        slug = slug.strip("-")
    return slug


def generate_slug(title: str) -> str:
    """SEO slug for new entries: drop punctuation, hyphenate whitespace."""
    if not title or not title.strip():
        return ""
    slug = _SLUG_UNSAFE.sub("", title.lower())
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip()
