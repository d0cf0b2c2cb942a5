# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: test_swapi_tools.py
# -----------------------------------------------------------------------------
import json

import pytest

from tools.SwapiTools import SwapiTools, extract_entity_ids


@pytest.fixture
def tools(sample_loader) -> SwapiTools:
    return SwapiTools(corpus_loader=sample_loader)


def _call(tools, name, **args):
    return json.loads(tools.call(name, json.dumps(args)))


def test_definitions_cover_every_tool(tools):
    defs = tools.definitions()

    names = [d["function"]["name"] for d in defs]
    assert names == tools.names
    assert len(names) == 12
    assert "search_characters" in names
    for d in defs:
        assert d["type"] == "function"
        assert d["function"]["parameters"]["required"]


def test_get_character_returns_entity_and_lookup(tools):
    out = _call(tools, "get_character", id=4)

    assert out["data"]["name"] == "Darth Vader"
    assert out["lookup"]["tool"] == "get_character"
    assert out["lookup"]["arguments"] == {"id": 4}
    assert "timestamp" in out["lookup"]


def test_arguments_may_be_a_dict(tools):
    out = json.loads(tools.call("get_film", {"id": 2}))
    assert out["data"]["title"] == "The Empire Strikes Back"


@pytest.mark.parametrize(
    "tool,entity_id,expected",
    [
        ("get_character_films", 1, ["A New Hope", "The Empire Strikes Back"]),
        ("get_planet_characters", 1, ["Luke Skywalker", "C-3PO", "Darth Vader"]),
        ("get_starship_characters", 10, ["Chewbacca", "Han Solo"]),
        ("get_species_characters", 3, ["Chewbacca"]),
    ],
)
def test_relationship_tools(tools, tool, entity_id, expected):
    out = _call(tools, tool, id=entity_id)
    assert [r["name"] for r in out["data"]] == expected
    assert all(set(r) == {"id", "name"} for r in out["data"])


def test_film_characters(tools):
    out = _call(tools, "get_film_characters", id=1)
    assert len(out["data"]) == 8


@pytest.mark.parametrize(
    "name,arguments",
    [
        ("get_character", json.dumps({"id": 999})),
        ("get_character", json.dumps({})),
        ("get_character", json.dumps({"id": "abc"})),
        ("get_character", "{not json"),
        ("get_death_star_plans", json.dumps({"id": 1})),
    ],
)
def test_failures_come_back_as_error_payloads(tools, name, arguments):
    out = json.loads(tools.call(name, arguments))

    assert "error" in out
    assert "data" not in out
    assert out["lookup"]["tool"] == name


@pytest.mark.parametrize(
    "attribute,expected",
    [
        ("yellow eyes", {"C-3PO", "Darth Vader"}),
        ("blue eyes", {"Luke Skywalker", "Obi-Wan Kenobi", "Chewbacca"}),
        ("blond hair", {"Luke Skywalker"}),
        ("fair skin", {"Luke Skywalker", "Obi-Wan Kenobi", "Han Solo"}),
        ("female", {"Leia Organa"}),
        ("male characters", {"Luke Skywalker", "Darth Vader", "Obi-Wan Kenobi", "Chewbacca", "Han Solo"}),
        ("purple eyes", set()),
        ("eyes", set()),
        ("tall", set()),
    ],
)
def test_search_characters(tools, attribute, expected):
    found = tools.search_characters(attribute)
    assert {c["name"] for c in found} == expected


def test_search_characters_call_reports_matches(tools):
    out = _call(tools, "search_characters", attribute="yellow eyes")

    assert out["totalMatches"] == 2
    assert out["searchQuery"] == "yellow eyes"
    assert set(out["data"][0]) == {"id", "name", "eye_color", "hair_color", "skin_color", "gender"}


def test_extract_entity_ids_groups_by_type():
    context = [
        {"metadata": {"entity_type": "characters", "entity_id": 4}},
        {"metadata": {"entity_type": "films", "entity_id": 1}},
        {"metadata": {"entity_type": "characters", "entity_id": 4}},
        {"metadata": {"entity_type": "characters", "entity_id": 1}},
        {"metadata": {}},
    ]

    ids = extract_entity_ids(context)

    assert ids["characters"] == [4, 1]
    assert ids["films"] == [1]
    assert ids["planets"] == []
