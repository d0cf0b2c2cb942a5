# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: test_attribute_query_patterns.py
# -----------------------------------------------------------------------------
import pytest

from search.AttributeQueryPatterns import (
    ATTRIBUTE_QUERY_PATTERNS,
    extract_key_terms,
    is_attribute_query,
    matching_patterns,
)


@pytest.mark.parametrize(
    "query",
    [
        "characters with red eyes",
        "hair is brown",
        "female characters",
        "height",
        "Who has BLUE EYES?",
        "whose eyes are yellow",
        "skin is pale",
        "skin colour fair",
        "which species is Chewbacca",
        "homeworld of Luke",
        "tallest male pilot",
        "characters with blond hair",
    ],
)
def test_attribute_queries(query):
    assert is_attribute_query(query) is True


@pytest.mark.parametrize(
    "query",
    [
        "Luke Skywalker",
        "Death Star",
        "Tell me about Jedi",
        "Which films did Han Solo appear in",
        "shortest route to Tatooine",
        "",
    ],
)
def test_non_attribute_queries(query):
    assert is_attribute_query(query) is False


# one positive example per configured pattern
PATTERN_EXAMPLES = {
    "color_feature": "red eyes",
    "eyes_are_color": "eyes are green",
    "hair_is_color": "hair is auburn",
    "skin_tone": "skin is dark",
    "physique": "mass",
    "gender": "gender",
    "species": "species",
    "homeworld": "homeworld",
}


def test_every_pattern_has_an_example():
    assert set(PATTERN_EXAMPLES) == {name for name, _ in ATTRIBUTE_QUERY_PATTERNS}


@pytest.mark.parametrize("name,query", sorted(PATTERN_EXAMPLES.items()))
def test_each_pattern_matches_its_example(name, query):
    assert name in matching_patterns(query)


def test_extract_key_terms_red_eyes():
    terms = extract_key_terms("red eyes")

    assert "red" in terms
    assert "eyes" in terms
    assert "eye color: red" in terms


def test_extract_key_terms_hair_and_skin_composites():
    assert "hair color: blonde" in extract_key_terms("blonde hair")

    skin_terms = extract_key_terms("pale skin")
    assert "skin color: pale" in skin_terms
    assert not any(t.startswith("eye color") for t in skin_terms)


def test_extract_key_terms_has_no_duplicates():
    terms = extract_key_terms("red eyes and red eyes")
    assert len(terms) == len(set(terms))


def test_extract_key_terms_falls_back_to_whole_query():
    assert extract_key_terms("  Tell me about Jedi ") == ["Tell me about Jedi"]
