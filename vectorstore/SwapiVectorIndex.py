# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-02-03
# Description: SwapiVectorIndex
# -----------------------------------------------------------------------------

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from embedding.IndexedRecord import IndexedRecord, VectorHit


@runtime_checkable
class SwapiIndexHandle(Protocol):
    name: str

    def vector_search(self, vector: Sequence[float], n: int) -> List[VectorHit]:
        ...

    def scan(self, page_size: int = 500) -> List[VectorHit]:
        ...

    def count(self) -> int:
        ...

    def dimensions(self) -> Optional[int]:
        ...


@runtime_checkable
class SwapiVectorIndex(Protocol):
    def create_index(self, name: str, records: Sequence[IndexedRecord]) -> SwapiIndexHandle:
        ...

    def open_index(self, name: str) -> SwapiIndexHandle:
        ...

    def list_index_names(self) -> List[str]:
        ...

    def drop_index(self, name: str) -> None:
        ...
