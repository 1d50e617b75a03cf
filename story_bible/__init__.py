"""
Story Bible Access Module.

Read-only capabilities over story entities (chapters, characters, locations,
arcs, relationships, foreshadowing, hooks, world rules) consumed by the
context builders, plus an in-memory implementation.

Usage:
    from story_bible import load_story_bible

    bible = load_story_bible("story.json")
    sources = bible.as_sources()
"""

from .in_memory import InMemoryStoryBible
from .loader import load_story_bible, story_bible_from_dict
from .ports import (
    ArcReader,
    ChapterReader,
    CharacterReader,
    ForeshadowingReader,
    HookReader,
    LocationReader,
    RelationshipReader,
    StorySources,
    WorldReader,
)

__all__ = [
    "InMemoryStoryBible",
    "load_story_bible",
    "story_bible_from_dict",
    "StorySources",
    "ChapterReader",
    "CharacterReader",
    "LocationReader",
    "ArcReader",
    "RelationshipReader",
    "ForeshadowingReader",
    "HookReader",
    "WorldReader",
]
