# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: SwapiTools
# -----------------------------------------------------------------------------
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from corpus.SwapiCorpus import ENTITY_TYPES, SwapiCorpus
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from utility.logging_utils import get_class_logger

_EYE_COLORS = r"(red|blue|green|yellow|brown|black|white|orange|purple|pink)"
_HAIR_COLORS = r"(red|blue|green|yellow|brown|black|white|orange|purple|pink|blond|blonde)"
_SKIN_COLORS = r"(red|blue|green|yellow|brown|black|white|orange|purple|pink|fair|dark|light)"

CHARACTER_SUMMARY_FIELDS = ("id", "name", "eye_color", "hair_color", "skin_color", "gender")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    collection: str
    relation: Optional[str] = None
    id_description: str = "The ID of the entity"


TOOL_SPECS = (
    ToolSpec(
        "get_character",
        "Get detailed information about a Star Wars character by their ID. "
        "Use this when you need more details about a specific character.",
        "characters",
        id_description="The ID of the character to retrieve",
    ),
    ToolSpec(
        "get_character_films",
        "Get all films that a specific character appears in. "
        "Use this to find what movies a character is featured in.",
        "characters",
        relation="films",
        id_description="The ID of the character",
    ),
    ToolSpec(
        "get_film",
        "Get detailed information about a Star Wars film by its ID. "
        "Use this when you need more details about a specific movie.",
        "films",
        id_description="The ID of the film to retrieve",
    ),
    ToolSpec(
        "get_film_characters",
        "Get all characters that appear in a specific film. Use this to find who appears in a movie.",
        "films",
        relation="characters",
        id_description="The ID of the film",
    ),
    ToolSpec(
        "get_planet",
        "Get detailed information about a Star Wars planet by its ID.",
        "planets",
        id_description="The ID of the planet to retrieve",
    ),
    ToolSpec(
        "get_planet_characters",
        "Get all characters that are from a specific planet. "
        "Use this to find who is from a particular homeworld.",
        "planets",
        relation="characters",
        id_description="The ID of the planet",
    ),
    ToolSpec(
        "get_starship",
        "Get detailed information about a Star Wars starship by its ID.",
        "starships",
        id_description="The ID of the starship to retrieve",
    ),
    ToolSpec(
        "get_starship_characters",
        "Get all characters that pilot a specific starship. Use this to find who pilots a particular ship.",
        "starships",
        relation="characters",
        id_description="The ID of the starship",
    ),
    ToolSpec(
        "get_species",
        "Get detailed information about a Star Wars species by its ID.",
        "species",
        id_description="The ID of the species to retrieve",
    ),
    ToolSpec(
        "get_species_characters",
        "Get all characters that belong to a specific species.",
        "species",
        relation="characters",
        id_description="The ID of the species",
    ),
    ToolSpec(
        "get_vehicle",
        "Get detailed information about a Star Wars vehicle by its ID.",
        "vehicles",
        id_description="The ID of the vehicle to retrieve",
    ),
)

SEARCH_CHARACTERS = "search_characters"


def extract_entity_ids(context: Iterable[Dict[str, Any]]) -> Dict[str, List[int]]:
    """Entity ids referenced by retrieved context items, grouped by entity type."""
    entity_ids: Dict[str, List[int]] = {t: [] for t in ENTITY_TYPES}
    for item in context:
        metadata = item.get("metadata") or {}
        entity_type = metadata.get("entity_type")
        entity_id = metadata.get("entity_id")
        if entity_type in entity_ids and entity_id is not None and entity_id not in entity_ids[entity_type]:
            entity_ids[entity_type].append(entity_id)
    return entity_ids


class SwapiTools:
    """
    Tool-calling functions the chat model can use for follow-up lookups
    against the entity corpus. Results are JSON strings carrying either
    `data` or `error`, plus a `lookup` trace for display.
    """

    def __init__(self, corpus_loader: SwapiCorpusLoader, logger: logging.Logger | None = None) -> None:
        self.corpus_loader = corpus_loader
        self.logger = logger or get_class_logger(self.__class__)
        self._specs = {s.name: s for s in TOOL_SPECS}

    @property
    def names(self) -> List[str]:
        return list(self._specs) + [SEARCH_CHARACTERS]

    def definitions(self) -> List[Dict[str, Any]]:
        defs = [
            {
                "type": "function",
                "function": {
                    "name": s.name,
                    "description": s.description,
                    "parameters": {
                        "type": "object",
                        "properties": {"id": {"type": "integer", "description": s.id_description}},
                        "required": ["id"],
                    },
                },
            }
            for s in TOOL_SPECS
        ]
        defs.append(
            {
                "type": "function",
                "function": {
                    "name": SEARCH_CHARACTERS,
                    "description": (
                        "Search all characters to find those with specific attributes like eye color, "
                        "hair color, skin color or gender. Use this for attribute-based queries."
                    ),
                    "parameters": {
                        "type": "object",
                        "properties": {
                            "attribute": {
                                "type": "string",
                                "description": 'The attribute to search for (e.g. "red eyes", "blond hair")',
                            }
                        },
                        "required": ["attribute"],
                    },
                },
            }
        )
        return defs

    def call(self, name: str, arguments: Union[str, Dict[str, Any], None]) -> str:
        lookup = {
            "tool": name,
            "arguments": arguments,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            args = json.loads(arguments) if isinstance(arguments, str) else dict(arguments or {})
            lookup["arguments"] = args

            if name == SEARCH_CHARACTERS:
                data = self.search_characters(str(args.get("attribute", "")))
                payload = {
                    "data": data,
                    "searchQuery": args.get("attribute"),
                    "totalMatches": len(data),
                    "lookup": lookup,
                }
                return json.dumps(payload, indent=2, default=str)

            spec = self._specs.get(name)
            if spec is None:
                raise KeyError(f"Unknown tool '{name}'")

            entity_id = int(args["id"])
            data = self._lookup(spec, entity_id)
            return json.dumps({"data": data, "lookup": lookup}, indent=2, default=str)

        except (LookupError, ValueError, TypeError) as e:
            self.logger.warning("Tool call %s(%r) failed: %s", name, arguments, e)
            return json.dumps({"error": f"{name} failed: {e}", "lookup": lookup}, indent=2, default=str)

    def _corpus(self) -> SwapiCorpus:
        return self.corpus_loader.cached()

    def _lookup(self, spec: ToolSpec, entity_id: int) -> Any:
        corpus = self._corpus()
        entity = corpus.get(spec.collection, entity_id)
        if entity is None:
            raise LookupError(f"No {spec.collection} entity with id {entity_id}")
        if spec.relation is None:
            return entity
        return [
            {"id": e.get("id"), "name": corpus.display_name(e)}
            for e in corpus.related(spec.collection, entity_id, spec.relation)
        ]

    def search_characters(self, attribute: str) -> List[Dict[str, Any]]:
        attr = attribute.lower()
        characters = self._corpus().list("characters")

        field_name, color = None, None
        if "eye" in attr:
            field_name, color = "eye_color", _first_match(_EYE_COLORS, attr)
        elif "hair" in attr:
            field_name, color = "hair_color", _first_match(_HAIR_COLORS, attr)
        elif "skin" in attr:
            field_name, color = "skin_color", _first_match(_SKIN_COLORS, attr)

        if field_name is not None:
            if color is None:
                return []
            matched = [c for c in characters if color in str(c.get(field_name) or "").lower()]
        elif re.search(r"\bfemale\b", attr):
            matched = [c for c in characters if str(c.get("gender") or "").lower() == "female"]
        elif re.search(r"\bmale\b", attr):
            matched = [c for c in characters if str(c.get("gender") or "").lower() == "male"]
        else:
            matched = []

        return [{k: c.get(k) for k in CHARACTER_SUMMARY_FIELDS} for c in matched]


def _first_match(pattern: str, text: str) -> Optional[str]:
    m = re.search(pattern, text)
    return m.group(1) if m else None
