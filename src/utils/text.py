"""
Case-insensitive term matching over policy text.

Every relevance and applicability check goes through ``mentions`` (lowercased
substring) or ``mentions_word`` (whole words, for short codes). Blank terms
never match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Optional


def normalize_term(term: Optional[str]) -> str:
    """Lowercase and trim a term; ``None`` becomes the empty string."""
    if not term:
        return ""
    return " ".join(term.lower().split())


def mentions(text: str, terms: Iterable[Optional[str]]) -> Optional[str]:
    """Return the first of *terms* found in *text*, or ``None``.

    Blank terms are skipped: an empty string is a substring of everything
    and would make every policy look relevant.

    Examples
    --------
    >>> mentions("Skin Substitutes for Diabetic Foot Ulcers", ["wound", "ulcer"])
    'ulcer'
    >>> mentions("Cardiac Pacemaker Coverage", ["wound", ""]) is None
    True
    """
    haystack = " ".join(text.lower().split())
    for term in terms:
        needle = normalize_term(term)
        if needle and needle in haystack:
            return needle
    return None


def mentions_word(text: str, terms: Iterable[Optional[str]]) -> Optional[str]:
    """Like ``mentions``, but *terms* must appear as whole words.

    A trailing plural ``s`` is allowed, so ``"dfu"`` matches "DFUs" but
    ``"pu"`` does not match "pulmonary".

    Examples
    --------
    >>> mentions_word("Treatment of DFUs", ["dfu"])
    'dfu'
    >>> mentions_word("Pulmonary Rehabilitation Services", ["pu"]) is None
    True
    """
    haystack = " ".join(text.lower().split())
    for term in terms:
        needle = normalize_term(term)
        if needle and re.search(rf"\b{re.escape(needle)}s?\b", haystack):
            return needle
    return None
