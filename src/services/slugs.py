"""
URL slugs for business accounts.

A business named "Lava Jato São João" gets the slug "lava-jato-sao-joao";
collisions get a numeric suffix ("-2", "-3", ...).
"""

import re
import unicodedata

DEFAULT_SLUG = "meu-negocio"


def slugify(text: str | None) -> str:
    """Lowercase, strip accents, collapse non-alphanumerics into single dashes."""
    normalized = unicodedata.normalize("NFD", (text or "").lower())
    ascii_only = "".join(c for c in normalized if not unicodedata.combining(c))
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_only).strip("-")
    return slug or DEFAULT_SLUG


def unique_slug(name: str | None, taken: set[str]) -> str:
    """Return a slug for name not present in taken, and record it there."""
    base = slugify(name)
    candidate = base
    n = 2
    while candidate in taken:
        candidate = f"{base}-{n}"
        n += 1
    taken.add(candidate)
    return candidate
