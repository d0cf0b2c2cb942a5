# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: EntityMetadata
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

Scalar = Union[str, int, float]


class MetadataKey(str, Enum):
    """Entity fields copied into the vector index metadata."""
    NAME = "name"
    TITLE = "title"
    EPISODE_ID = "episode_id"
    DIRECTOR = "director"
    PRODUCER = "producer"
    HOMEWORLD = "homeworld"
    SPECIES = "species"


def _is_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float))


@dataclass
class EntityMetadata:
    entity_type: str
    entity_id: int
    fields: Dict[MetadataKey, Scalar] = field(default_factory=dict)

    @classmethod
    def from_entity(cls, entity_type: str, entity: Dict[str, Any]) -> "EntityMetadata":
        fields = {
            key: entity[key.value]
            for key in MetadataKey
            if _is_scalar(entity.get(key.value))
        }
        return cls(entity_type=entity_type, entity_id=entity["id"], fields=fields)

    def get(self, key: MetadataKey) -> Optional[Scalar]:
        return self.fields.get(key)

    def to_dict(self) -> Dict[str, Scalar]:
        """Flat dict for the vector store; absent keys are omitted rather than null."""
        out: Dict[str, Scalar] = {
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
        }
        for key, value in self.fields.items():
            out[key.value] = value
        return out
