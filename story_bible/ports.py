"""
Read-only capabilities the context builders consume.

One narrow interface per entity kind. Any storage layer (SQL, document
store, the in-memory bible) can stand behind them.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from shared.schemas import (
    Arc,
    Chapter,
    Character,
    Foreshadowing,
    Hook,
    Location,
    Relationship,
    World,
)


class ChapterReader(Protocol):
    def find_chapter_with_content(self, chapter_id: int) -> Optional[Chapter]:
        """Chapter including its full text, or None."""
        ...

    def find_chapters_by_volume(self, volume_id: int) -> List[Chapter]:
        """Chapters of a volume in reading order, without text."""
        ...

    def find_all_chapters(self) -> List[Chapter]:
        """All chapters ordered by id, without text."""
        ...


class CharacterReader(Protocol):
    def find_by_ids(self, ids: Sequence[str]) -> List[Character]:
        """Batch lookup; missing ids are skipped."""
        ...

    def find_all(self) -> List[Character]:
        ...


class LocationReader(Protocol):
    def find_by_ids(self, ids: Sequence[str]) -> List[Location]:
        ...

    def find_all(self) -> List[Location]:
        ...


class ArcReader(Protocol):
    def find_by_id(self, arc_id: str) -> Optional[Arc]:
        ...

    def find_all(self) -> List[Arc]:
        ...


class RelationshipReader(Protocol):
    def find_scoped(self, character_ids: Sequence[str]) -> List[Relationship]:
        """Relationships whose source and target are both in character_ids."""
        ...

    def find_all(self) -> List[Relationship]:
        ...


class ForeshadowingReader(Protocol):
    def find_by_ids(self, ids: Sequence[str]) -> List[Foreshadowing]:
        ...

    def find_active(self) -> List[Foreshadowing]:
        """Every foreshadowing entity whose status is active."""
        ...

    def find_all(self) -> List[Foreshadowing]:
        ...


class HookReader(Protocol):
    def find_by_chapter(self, chapter_id: int) -> List[Hook]:
        ...


class WorldReader(Protocol):
    def get(self) -> Optional[World]:
        ...


@dataclass
class StorySources:
    """All read capabilities a context builder needs."""

    chapters: ChapterReader
    characters: CharacterReader
    locations: LocationReader
    arcs: ArcReader
    relationships: RelationshipReader
    foreshadowing: ForeshadowingReader
    hooks: HookReader
    world: WorldReader
