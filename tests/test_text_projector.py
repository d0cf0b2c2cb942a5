# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: test_text_projector.py
# -----------------------------------------------------------------------------
import logging

import pytest

from corpus.EntityMetadata import MetadataKey
from corpus.SwapiCorpus import SwapiCorpus
from corpus.SwapiTextProjector import SwapiTextProjector


@pytest.fixture
def projector() -> SwapiTextProjector:
    return SwapiTextProjector()


def test_character_fields_are_labelled(projector):
    entity = {"id": 1, "name": "Luke Skywalker", "height": "172", "hair_color": "blond"}

    text = projector.project("characters", entity)

    assert text.startswith("This is a character from Star Wars.")
    assert "Name: Luke Skywalker" in text
    assert "height: 172" in text
    assert "hair color: blond" in text


def test_film_crawl_line_breaks_are_collapsed(projector):
    entity = {
        "id": 1,
        "title": "A New Hope",
        "episode_id": 4,
        "opening_crawl": "It is a period of civil war.\r\nRebel spaceships,\nstriking",
    }

    text = projector.project("films", entity)

    assert "Name: A New Hope" in text
    assert "Story: It is a period of civil war. Rebel spaceships, striking" in text
    assert "episode: 4" in text
    assert "\n" not in text and "\r" not in text


def test_species_stays_singular(projector):
    text = projector.project("species", {"id": 3, "name": "Wookie"})
    assert text.startswith("This is a species from Star Wars.")


def test_empty_null_and_boolean_fields_are_skipped(projector):
    entity = {
        "id": 9,
        "name": "Biggs Darklighter",
        "hair_color": "",
        "skin_color": "   ",
        "mass": None,
        "jedi": True,
        "height": 183,
        "tags": ["pilot"],
    }

    text = projector.project("characters", entity)

    assert "hair color" not in text
    assert "skin color" not in text
    assert "mass" not in text
    assert "jedi" not in text
    assert "tags" not in text
    assert "height: 183" in text


def test_projection_is_deterministic(projector, sample_corpus):
    entity = sample_corpus.get("characters", 4)
    assert projector.project("characters", entity, sample_corpus) == projector.project(
        "characters", entity, sample_corpus
    )


def test_no_projection_contains_id_field(projector, sample_corpus):
    for entity_type, entities in sample_corpus.entity_collections():
        for entity in entities:
            text = projector.project(entity_type, entity, sample_corpus)
            assert "id:" not in text, f"{entity_type} {entity['id']}: {text}"
            assert "None" not in text


def test_character_relationships(projector, sample_corpus):
    luke = sample_corpus.get("characters", 1)

    text = projector.project("characters", luke, sample_corpus)

    assert "Appears in movies: A New Hope, The Empire Strikes Back" in text
    assert "Pilots starships: X-wing" in text
    assert "Drives vehicles: Snowspeeder" in text


def test_planet_residents_resolved_by_foreign_key(projector, sample_corpus):
    tatooine = sample_corpus.get("planets", 1)

    text = projector.project("planets", tatooine, sample_corpus)

    assert "Home to characters: Luke Skywalker, C-3PO, Darth Vader" in text
    assert "Appears in movies: A New Hope" in text


def test_species_members_from_edge_and_foreign_key_are_not_duplicated(projector, sample_corpus):
    wookie = sample_corpus.get("species", 3)

    text = projector.project("species", wookie, sample_corpus)

    assert "Characters of this species: Chewbacca" in text
    assert text.count("Chewbacca") == 1


def test_film_skips_unprojected_relations(projector, sample_corpus):
    film = sample_corpus.get("films", 1)

    text = projector.project("films", film, sample_corpus)

    assert text.startswith("This is a film from Star Wars.")
    assert "Characters: Luke Skywalker" in text
    assert "Planets: Tatooine, Alderaan" in text
    assert "Starships: Millennium Falcon, X-wing, TIE Advanced x1" in text
    assert "Species:" not in text
    assert "Vehicles:" not in text


def test_empty_relationship_groups_are_omitted(projector, sample_corpus):
    stewjon = sample_corpus.get("planets", 4)

    text = projector.project("planets", stewjon, sample_corpus)

    assert "Home to characters: Obi-Wan Kenobi" in text
    assert "Appears in movies" not in text


def test_malformed_edge_collection_drops_only_relationships(caplog):
    corpus = SwapiCorpus(
        {
            "characters": [{"id": 1, "name": "Luke Skywalker"}],
            "films": [{"id": 1, "title": "A New Hope"}],
            "films_characters": "not-a-list",
        }
    )
    logger = logging.getLogger("test.projector")
    projector = SwapiTextProjector(logger=logger)

    with caplog.at_level(logging.ERROR, logger="test.projector"):
        text = projector.project("characters", corpus.get("characters", 1), corpus)

    assert "Name: Luke Skywalker" in text
    assert "Appears in movies" not in text
    assert any("relationship" in r.getMessage() for r in caplog.records)


def test_extract_metadata_keeps_recognised_keys_only(projector, sample_corpus):
    film = sample_corpus.get("films", 1)

    meta = projector.extract_metadata("films", film)

    assert meta.get(MetadataKey.TITLE) == "A New Hope"
    assert meta.get(MetadataKey.EPISODE_ID) == 4
    assert meta.get(MetadataKey.NAME) is None
    assert meta.to_dict() == {
        "entity_type": "films",
        "entity_id": 1,
        "title": "A New Hope",
        "episode_id": 4,
        "director": "George Lucas",
        "producer": "Gary Kurtz, Rick McCallum",
    }


def test_metadata_for_character_includes_homeworld(projector, sample_corpus):
    meta = projector.extract_metadata("characters", sample_corpus.get("characters", 4)).to_dict()

    assert meta["entity_type"] == "characters"
    assert meta["entity_id"] == 4
    assert meta["name"] == "Darth Vader"
    assert meta["homeworld"] == 1
    assert "eye_color" not in meta
