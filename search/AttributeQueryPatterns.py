# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: AttributeQueryPatterns
# -----------------------------------------------------------------------------
import re
from typing import List, Pattern, Tuple

COLORS = (
    "red", "blue", "green", "yellow", "brown", "black", "white", "orange",
    "purple", "pink", "blond", "blonde", "grey", "gray", "gold", "hazel", "auburn",
)
SKIN_TONES = COLORS + ("fair", "dark", "light", "pale", "tan")

FEATURE_WORDS = ("eyes", "eye", "hair", "skin")
ATTRIBUTE_WORDS = (
    "male", "female", "tall", "short", "height", "mass", "weight", "species", "homeworld",
)

_COLOR_ALT = "|".join(COLORS)
_SKIN_ALT = "|".join(SKIN_TONES)

# Heuristic allow-list: a query matching any of these targets a physical or
# categorical trait, so keyword matching is run alongside vector search.
ATTRIBUTE_QUERY_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("color_feature", rf"\b({_COLOR_ALT})\s+(eyes?|hair|skin)\b"),
    ("eyes_are_color", rf"\beyes?\s+(are|is)\s+({_COLOR_ALT})\b"),
    ("hair_is_color", rf"\bhair\s+is\s+({_COLOR_ALT})\b"),
    ("skin_tone", rf"\bskin\s+(is|colou?r)\s+({_SKIN_ALT})\b"),
    ("physique", r"\b(tall|short|height|mass|weight)\b"),
    ("gender", r"\b(male|female|gender)\b"),
    ("species", r"\bspecies\b"),
    ("homeworld", r"\bhomeworld\b"),
)

COMPILED_PATTERNS: List[Tuple[str, Pattern[str]]] = [
    (name, re.compile(rx, re.IGNORECASE)) for name, rx in ATTRIBUTE_QUERY_PATTERNS
]

# Words that count as key terms when they appear in a query
KEY_TERMS = tuple(dict.fromkeys(SKIN_TONES + FEATURE_WORDS + ATTRIBUTE_WORDS))
_KEY_TERM_SET = frozenset(KEY_TERMS)

# (composite label, words that trigger it, values that may fill it)
COMPOSITE_FEATURES = (
    ("eye color", frozenset(("eye", "eyes")), frozenset(COLORS)),
    ("hair color", frozenset(("hair",)), frozenset(COLORS)),
    ("skin color", frozenset(("skin",)), frozenset(SKIN_TONES)),
)

_WORD = re.compile(r"[a-z]+")


def matching_patterns(query: str) -> List[str]:
    """Names of the attribute patterns the query matches."""
    return [name for name, rx in COMPILED_PATTERNS if rx.search(query or "")]


def is_attribute_query(query: str) -> bool:
    return any(rx.search(query or "") for _, rx in COMPILED_PATTERNS)


def extract_key_terms(query: str) -> List[str]:
    """
    Vocabulary words found in the query, then composites such as
    "eye color: red" when a colour and a feature word appear together.
    Falls back to the whole query when no vocabulary word is present.
    """
    words = _WORD.findall((query or "").lower())
    found = list(dict.fromkeys(w for w in words if w in _KEY_TERM_SET))

    if not found:
        return [(query or "").strip()]

    terms = list(found)
    found_set = set(found)
    for label, triggers, values in COMPOSITE_FEATURES:
        if not (triggers & found_set):
            continue
        for word in found:
            if word in values:
                terms.append(f"{label}: {word}")

    return list(dict.fromkeys(terms))
