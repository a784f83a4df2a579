"""Canonical slugs for free-text category labels."""

import re
from typing import Optional

_SEPARATOR_RUN = re.compile(r"-*[\s/][\s/-]*")


def normalize(label: Optional[str]) -> str:
    """Lower-case ``label`` and collapse whitespace/slash runs into single dashes.

    ``"Spa & Massage"`` and ``"spa-&-massage"`` both become ``"spa-&-massage"``.
    Empty or separator-only input yields ``""``; callers treat that as
    unclassifiable.
    """
    if not label:
        return ""
    slug = _SEPARATOR_RUN.sub("-", label.strip().lower())
    return slug.strip("-")
