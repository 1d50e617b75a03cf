"""
Load a story bible from a JSON document.

The document is validated with pydantic before any entity is stored, so a
malformed file never leaves a half-populated bible behind.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from shared.errors import StoryBibleLoadError
from shared.schemas import StoryBibleDocument

from .in_memory import InMemoryStoryBible

logger = logging.getLogger(__name__)


def story_bible_from_dict(data: Dict[str, Any]) -> InMemoryStoryBible:
    """
    Build an in-memory story bible from parsed JSON.

    Args:
        data: Mapping with optional keys chapters, characters, relationships,
              locations, arcs, foreshadowing, hooks, world

    Returns:
        Populated InMemoryStoryBible

    Raises:
        StoryBibleLoadError: if the data does not match the entity schemas
    """
    try:
        document = StoryBibleDocument.model_validate(data)
    except ValidationError as e:
        raise StoryBibleLoadError(
            f"Invalid story bible: {e.error_count()} validation error(s)",
            {"errors": e.errors(include_url=False)},
        ) from e

    bible = InMemoryStoryBible()
    for chapter in document.chapters:
        bible.add_chapter(chapter)
    for character in document.characters:
        bible.add_character(character)
    for relationship in document.relationships:
        bible.add_relationship(relationship)
    for location in document.locations:
        bible.add_location(location)
    for arc in document.arcs:
        bible.add_arc(arc)
    for foreshadowing in document.foreshadowing:
        bible.add_foreshadowing(foreshadowing)
    for hook in document.hooks:
        bible.add_hook(hook)
    bible.set_world(document.world)

    logger.info(f"Loaded story bible: {bible.get_stats()}")
    return bible


def load_story_bible(path: Union[str, Path]) -> InMemoryStoryBible:
    """Read and validate a story bible JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise StoryBibleLoadError(f"Story bible not found: {path}", {"path": str(path)}) from e
    except json.JSONDecodeError as e:
        raise StoryBibleLoadError(
            f"Story bible is not valid JSON: {path} (line {e.lineno})",
            {"path": str(path)},
        ) from e

    if not isinstance(data, dict):
        raise StoryBibleLoadError(
            f"Story bible must be a JSON object: {path}", {"path": str(path)}
        )

    return story_bible_from_dict(data)
