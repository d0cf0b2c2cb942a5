# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: SwapiTextProjector
# -----------------------------------------------------------------------------
import logging
import re
from typing import Any, Dict, List, Optional

from corpus.EntityMetadata import EntityMetadata
from corpus.SwapiCorpus import RELATIONSHIPS, SwapiCorpus, singular
from utility.logging_utils import get_class_logger

NAME_FIELDS = ("name", "title")
STORY_FIELD = "opening_crawl"

_LINE_BREAKS = re.compile(r"[\r\n]+")


def _label(key: str) -> str:
    # foreign keys read as their target: species_id -> "species"
    if key.endswith("_id"):
        key = key[:-3]
    return key.replace("_", " ")


class SwapiTextProjector:
    """
    Turns one entity (plus its relationships) into the text blob that gets
    embedded. Deterministic for identical inputs.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_class_logger(self.__class__)

    def project(
        self,
        entity_type: str,
        entity: Dict[str, Any],
        corpus: Optional[SwapiCorpus] = None,
    ) -> str:
        content: List[str] = [f"This is a {singular(entity_type)} from Star Wars."]

        for key, value in entity.items():
            if key == "id":
                continue
            fragment = self._field_fragment(key, value)
            if fragment:
                content.append(fragment)

        if corpus is not None:
            content.extend(self.relationship_fragments(entity_type, entity, corpus))

        return ". ".join(content)

    @staticmethod
    def _field_fragment(key: str, value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            if not value.strip():
                return None
            if key in NAME_FIELDS:
                return f"Name: {value}"
            if key == STORY_FIELD:
                return f"Story: {_LINE_BREAKS.sub(' ', value)}"
            return f"{_label(key)}: {value}"
        if isinstance(value, (int, float)):
            return f"{_label(key)}: {value}"
        return None

    def relationship_fragments(
        self,
        entity_type: str,
        entity: Dict[str, Any],
        corpus: Optional[SwapiCorpus],
    ) -> List[str]:
        """
        One sentence per non-empty relationship group. Any failure while
        resolving yields no sentences at all; it is logged, never raised.
        """
        entity_id = entity.get("id")
        if entity_id is None or corpus is None:
            return []

        try:
            fragments: List[str] = []
            for rel in RELATIONSHIPS.get(entity_type, ()):
                if not rel.project:
                    continue
                names = [corpus.display_name(e) for e in corpus.resolve(entity_type, entity_id, rel)]
                if names:
                    fragments.append(f"{rel.label}: {', '.join(names)}")
            return fragments
        except Exception as e:
            self.logger.error(
                "Failed to add relationship info for %s id=%s: %s",
                entity_type,
                entity_id,
                e,
                exc_info=True,
            )
            return []

    @staticmethod
    def extract_metadata(entity_type: str, entity: Dict[str, Any]) -> EntityMetadata:
        return EntityMetadata.from_entity(entity_type, entity)
