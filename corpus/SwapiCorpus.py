# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: SwapiCorpus
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

Entity = Dict[str, Any]

ENTITY_TYPES = ("characters", "films", "planets", "starships", "vehicles", "species")

# Collection name -> singular form. Anything else falls back to stripping a trailing "s".
SINGULAR = {
    "characters": "character",
    "films": "film",
    "planets": "planet",
    "starships": "starship",
    "vehicles": "vehicle",
    "species": "species",
}


def singular(collection: str) -> str:
    if collection in SINGULAR:
        return SINGULAR[collection]
    return collection[:-1] if collection.endswith("s") else collection


def id_column(collection: str) -> str:
    """Join-table column that references `collection`, e.g. films -> film_id."""
    return f"{singular(collection)}_id"


def is_edge_collection(name: str) -> bool:
    """Edge collections are named <collection>_<collection>, e.g. films_characters."""
    parts = name.split("_")
    return len(parts) == 2 and all(p in ENTITY_TYPES for p in parts)


@dataclass(frozen=True)
class Relation:
    """
    How entities of one collection connect to another.

    edge_collection: join table holding <source>_id / <target>_id rows
    foreign_key:     field on the *target* entity that stores the source id
    project:         include this relation in text projections
    """
    target: str
    label: str
    edge_collection: Optional[str] = None
    foreign_key: Optional[str] = None
    project: bool = True


RELATIONSHIPS: Dict[str, Tuple[Relation, ...]] = {
    "characters": (
        Relation("films", "Appears in movies", edge_collection="films_characters"),
        Relation("starships", "Pilots starships", edge_collection="starships_characters"),
        Relation("vehicles", "Drives vehicles", edge_collection="vehicles_characters"),
    ),
    "films": (
        Relation("characters", "Characters", edge_collection="films_characters"),
        Relation("planets", "Planets", edge_collection="films_planets"),
        Relation("starships", "Starships", edge_collection="films_starships"),
        Relation("species", "Species", edge_collection="films_species", project=False),
        Relation("vehicles", "Vehicles", edge_collection="films_vehicles", project=False),
    ),
    "starships": (
        Relation("characters", "Piloted by", edge_collection="starships_characters"),
        Relation("films", "Appears in movies", edge_collection="films_starships"),
    ),
    "vehicles": (
        Relation("characters", "Driven by", edge_collection="vehicles_characters"),
        Relation("films", "Appears in movies", edge_collection="films_vehicles"),
    ),
    "planets": (
        Relation("films", "Appears in movies", edge_collection="films_planets"),
        Relation("characters", "Home to characters", foreign_key="homeworld"),
    ),
    "species": (
        Relation("films", "Appears in movies", edge_collection="films_species"),
        Relation(
            "characters",
            "Characters of this species",
            edge_collection="species_characters",
            foreign_key="species_id",
        ),
    ),
}


class SwapiCorpus:
    """
    Read-only view over the parsed database document: entity collections
    plus the join tables that link them.
    """

    def __init__(self, collections: Dict[str, Any]) -> None:
        self.collections = collections

    def entity_collections(self) -> Iterator[Tuple[str, List[Entity]]]:
        for name, rows in self.collections.items():
            if is_edge_collection(name) or not isinstance(rows, list):
                continue
            yield name, rows

    def entity_count(self) -> int:
        return sum(len(rows) for _, rows in self.entity_collections())

    def has_collection(self, entity_type: str) -> bool:
        return isinstance(self.collections.get(entity_type), list) and not is_edge_collection(entity_type)

    def _rows(self, name: str) -> List[Entity]:
        rows = self.collections.get(name)
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise TypeError(f"Collection '{name}' is not a list (got {type(rows).__name__})")
        return rows

    def list(self, entity_type: str, search: Optional[str] = None) -> List[Entity]:
        if not self.has_collection(entity_type):
            raise KeyError(f"Unknown collection '{entity_type}'")
        rows = self._rows(entity_type)
        needle = (search or "").strip().lower()
        if not needle:
            return list(rows)
        return [e for e in rows if needle in str(e.get("name") or e.get("title") or "").lower()]

    def get(self, entity_type: str, entity_id: int) -> Optional[Entity]:
        if not self.has_collection(entity_type):
            return None
        for entity in self._rows(entity_type):
            if entity.get("id") == entity_id:
                return entity
        return None

    def relation(self, entity_type: str, target_type: str) -> Optional[Relation]:
        for rel in RELATIONSHIPS.get(entity_type, ()):
            if rel.target == target_type:
                return rel
        return None

    def related(self, entity_type: str, entity_id: int, target_type: str) -> List[Entity]:
        """
        Entities of `target_type` connected to (entity_type, entity_id), in
        target collection order. Raises KeyError for an undefined relation
        and TypeError when a collection involved is malformed.
        """
        rel = self.relation(entity_type, target_type)
        if rel is None:
            raise KeyError(f"No relation '{entity_type}' -> '{target_type}'")
        return self.resolve(entity_type, entity_id, rel)

    def resolve(self, entity_type: str, entity_id: int, rel: Relation) -> List[Entity]:
        target_rows = self._rows(rel.target)
        target_ids = set()

        if rel.edge_collection:
            source_col = id_column(entity_type)
            target_col = id_column(rel.target)
            for row in self._rows(rel.edge_collection):
                if row.get(source_col) == entity_id:
                    target_ids.add(row.get(target_col))

        if rel.foreign_key:
            for row in target_rows:
                if row.get(rel.foreign_key) == entity_id:
                    target_ids.add(row.get("id"))

        return [row for row in target_rows if row.get("id") in target_ids]

    @staticmethod
    def display_name(entity: Entity) -> str:
        name = entity.get("name") or entity.get("title")
        if isinstance(name, str) and name.strip():
            return name
        return f"#{entity.get('id')}"
