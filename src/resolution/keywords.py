"""
Keyword tables for wound-care policy relevance and applicability.

These tables are versioned: any change to a term list must bump
``KEYWORD_TABLE_VERSION``, which is written into every selection audit so a
past decision can be replayed with the terms that produced it.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from src.utils.text import mentions, mentions_word, normalize_term

KEYWORD_TABLE_VERSION = "2025.10.1"

# Any of these in a policy title or body marks it as wound-care relevant.
WOUND_CARE_KEYWORDS: tuple[str, ...] = (
    "skin substitute",
    "ctp",
    "cellular tissue product",
    "wound",
    "ulcer",
    "diabetic foot",
    "diabetic",
    "venous",
    "debridement",
    "cellular",
    "tissue",
    "graft",
    "matrix",
    "collagen",
)

# Clinical abbreviations expanded to the phrases policies actually use.
WOUND_TYPE_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "dfu": ("diabetic foot ulcer",),
    "vlu": ("venous leg ulcer", "venous stasis ulcer"),
    "pu": ("pressure ulcer", "pressure injury"),
})

# Patient flag -> terms that show the policy addresses that population.
PATIENT_CHARACTERISTIC_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "is_diabetic": ("diabetic", "diabetes"),
    "has_venous_disease": ("venous",),
    "has_vascular_disease": ("vascular", "arterial", "peripheral artery"),
})


def wound_type_terms(wound_type: str) -> tuple[str, ...]:
    """The wound type itself followed by its known aliases."""
    key = normalize_term(wound_type)
    return (key,) + WOUND_TYPE_ALIASES.get(key, ())


def mentions_wound_type(text: str, wound_type: str) -> Optional[str]:
    """Find the wound type in *text*.

    The query's own term must appear as a whole word, so short codes such as
    ``PU`` do not match "pulmonary". Alias phrases match as substrings.
    """
    key, *aliases = wound_type_terms(wound_type)
    return mentions_word(text, [key]) or mentions(text, aliases)


def relevance_terms(wound_type: str, wound_location: str | None = None) -> tuple[str, ...]:
    """Substring terms for the wound-care relevance filter.

    Excludes the raw wound type, which is matched on word boundaries by
    ``mentions_wound_type``.
    """
    terms = WOUND_CARE_KEYWORDS + wound_type_terms(wound_type)[1:]
    if wound_location:
        terms += (normalize_term(wound_location),)
    return terms
