"""
Slug generation helpers.

Slugs are the public, URL-safe key of an episode (e.g. /episodes/coca-cola).
"""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def derive_slug(title: str) -> str:
    """
    Derive a URL-safe slug from an episode title.

    Rules:
    1. Lowercase
    2. Drop everything except ASCII letters, digits, whitespace and hyphens
    3. Collapse whitespace runs into a single hyphen
    4. Collapse repeated hyphens
    5. Trim hyphens at both ends

    Examples:
        >>> derive_slug("Coca-Cola")
        'coca-cola'
        >>> derive_slug("  10 Years of Acquired (with Michael Lewis)! ")
        '10-years-of-acquired-with-michael-lewis'
    """
    if not title:
        return ""

    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")
