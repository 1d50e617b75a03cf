"""
Error types for the story context engine.

Only the root chapter of a chapter-scoped build is a hard requirement;
every other lookup is best-effort and never raises.
"""

from typing import Any, Dict, Optional, Union


class StoryContextError(Exception):
    """Base class for engine errors."""

    code = "STORY_CONTEXT_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for API responses and structured logs."""
        data: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.context:
            data["context"] = self.context
        return data


class EntityNotFoundError(StoryContextError):
    """Raised when a required entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Union[str, int]):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} {entity_id} not found",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


class StoryBibleLoadError(StoryContextError):
    """Raised when a story bible document cannot be read or validated."""

    code = "INVALID_STORY_BIBLE"
