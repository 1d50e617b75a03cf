"""
In-memory story bible.

Implements every read capability in ports.py over plain dicts. Useful for
tests, demos and callers that already hold the whole story in memory.

In production, back the ports with the real story database.

Usage:
    bible = InMemoryStoryBible()
    bible.add_character(Character(id="C001", name="Lin Feng", role="main"))
    bible.add_chapter(Chapter(id=1, content="...", characters=["C001"]))
    builder = ChapterContextBuilder(bible.as_sources())
"""

from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from shared.schemas import (
    Arc,
    Chapter,
    Character,
    Foreshadowing,
    ForeshadowingStatus,
    Hook,
    Location,
    Relationship,
    World,
)

from .ports import StorySources

T = TypeVar("T")


def _pick(store: Dict[str, T], ids: Iterable[str]) -> List[T]:
    """Found entities in requested order; missing and repeated ids skipped."""
    found: List[T] = []
    seen = set()
    for entity_id in ids:
        if entity_id in seen:
            continue
        seen.add(entity_id)
        entity = store.get(entity_id)
        if entity is not None:
            found.append(entity)
    return found


class InMemoryChapterStore:
    def __init__(self):
        self._chapters: Dict[int, Chapter] = {}

    def add(self, chapter: Chapter) -> None:
        self._chapters[chapter.id] = chapter

    def find_chapter_with_content(self, chapter_id: int) -> Optional[Chapter]:
        return self._chapters.get(chapter_id)

    def find_all_chapters(self) -> List[Chapter]:
        return [
            self._without_content(self._chapters[cid])
            for cid in sorted(self._chapters)
        ]

    def find_chapters_by_volume(self, volume_id: int) -> List[Chapter]:
        chapters = [c for c in self._chapters.values() if c.volume_id == volume_id]
        chapters.sort(key=lambda c: (c.sort_order, c.id))
        return [self._without_content(c) for c in chapters]

    @staticmethod
    def _without_content(chapter: Chapter) -> Chapter:
        return chapter.model_copy(update={"content": None})


class InMemoryEntityStore:
    """Id-keyed store for characters, locations and arcs."""

    def __init__(self):
        self._entities: Dict[str, object] = {}

    def add(self, entity) -> None:
        self._entities[entity.id] = entity

    def find_by_id(self, entity_id: str):
        return self._entities.get(entity_id)

    def find_by_ids(self, ids: Sequence[str]) -> list:
        return _pick(self._entities, ids)

    def find_all(self) -> list:
        return [self._entities[eid] for eid in sorted(self._entities)]


class InMemoryRelationshipStore:
    def __init__(self):
        self._relationships: Dict[int, Relationship] = {}

    def add(self, relationship: Relationship) -> None:
        self._relationships[relationship.id] = relationship

    def find_scoped(self, character_ids: Sequence[str]) -> List[Relationship]:
        scope = set(character_ids)
        return [
            r
            for r in self.find_all()
            if r.source_id in scope and r.target_id in scope
        ]

    def find_all(self) -> List[Relationship]:
        return [self._relationships[rid] for rid in sorted(self._relationships)]


class InMemoryForeshadowingStore(InMemoryEntityStore):
    def find_active(self) -> List[Foreshadowing]:
        return [f for f in self.find_all() if f.status == ForeshadowingStatus.ACTIVE.value]


class InMemoryHookStore:
    def __init__(self):
        self._hooks: Dict[str, Hook] = {}

    def add(self, hook: Hook) -> None:
        self._hooks[hook.id] = hook

    def find_by_chapter(self, chapter_id: int) -> List[Hook]:
        return [
            self._hooks[hid]
            for hid in sorted(self._hooks)
            if self._hooks[hid].chapter_id == chapter_id
        ]


class InMemoryWorldStore:
    def __init__(self):
        self._world: Optional[World] = None

    def set(self, world: Optional[World]) -> None:
        self._world = world

    def get(self) -> Optional[World]:
        return self._world


class InMemoryStoryBible:
    """All story bible entities held in memory."""

    def __init__(self):
        self.chapters = InMemoryChapterStore()
        self.characters = InMemoryEntityStore()
        self.locations = InMemoryEntityStore()
        self.arcs = InMemoryEntityStore()
        self.relationships = InMemoryRelationshipStore()
        self.foreshadowing = InMemoryForeshadowingStore()
        self.hooks = InMemoryHookStore()
        self.world = InMemoryWorldStore()

    def add_chapter(self, chapter: Chapter) -> None:
        self.chapters.add(chapter)

    def add_character(self, character: Character) -> None:
        self.characters.add(character)

    def add_location(self, location: Location) -> None:
        self.locations.add(location)

    def add_arc(self, arc: Arc) -> None:
        self.arcs.add(arc)

    def add_relationship(self, relationship: Relationship) -> None:
        self.relationships.add(relationship)

    def add_foreshadowing(self, foreshadowing: Foreshadowing) -> None:
        self.foreshadowing.add(foreshadowing)

    def add_hook(self, hook: Hook) -> None:
        self.hooks.add(hook)

    def set_world(self, world: Optional[World]) -> None:
        self.world.set(world)

    def as_sources(self) -> StorySources:
        """Expose the stores through the builders' read capabilities."""
        return StorySources(
            chapters=self.chapters,
            characters=self.characters,
            locations=self.locations,
            arcs=self.arcs,
            relationships=self.relationships,
            foreshadowing=self.foreshadowing,
            hooks=self.hooks,
            world=self.world,
        )

    def get_stats(self) -> Dict:
        """Entity counts per kind."""
        return {
            "chapters": len(self.chapters.find_all_chapters()),
            "characters": len(self.characters.find_all()),
            "locations": len(self.locations.find_all()),
            "arcs": len(self.arcs.find_all()),
            "relationships": len(self.relationships.find_all()),
            "foreshadowing": len(self.foreshadowing.find_all()),
            "world": self.world.get() is not None,
        }
