"""
Pydantic schemas for story bible entities.

These are the read-only facts the context builders consume. The engine never
mutates them; collaborators hand out validated instances.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StoryModel(BaseModel):
    """Base model: enum fields are stored as their plain string values."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True, frozen=True)


class CharacterRole(str, Enum):
    MAIN = "main"
    SUPPORTING = "supporting"
    ANTAGONIST = "antagonist"
    MENTIONED = "mentioned"


class ArcStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class ForeshadowingStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


class ChapterOutline(StoryModel):
    """Author's plan for a chapter."""

    goal: Optional[str] = None
    scenes: List[str] = Field(default_factory=list)
    hook_ending: Optional[str] = None


class Chapter(StoryModel):
    """A chapter with its foreign-key references into the story bible."""

    id: int
    volume_id: Optional[int] = None
    arc_id: Optional[str] = None
    title: Optional[str] = None
    status: str = "outline"
    sort_order: int = 0
    outline: Optional[ChapterOutline] = None
    content: Optional[str] = Field(
        default=None, description="Full text; omitted by listing lookups"
    )
    characters: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    foreshadowing_planted: List[str] = Field(default_factory=list)
    foreshadowing_hinted: List[str] = Field(default_factory=list)
    foreshadowing_resolved: List[str] = Field(default_factory=list)


class CharacterMotivation(StoryModel):
    surface: str
    hidden: Optional[str] = None
    core: Optional[str] = None


class CharacterFacets(StoryModel):
    public: str
    private: Optional[str] = None
    hidden: Optional[str] = None
    under_pressure: Optional[str] = None


class Character(StoryModel):
    """A character sheet."""

    id: str
    name: str
    role: CharacterRole = CharacterRole.SUPPORTING
    appearance: Optional[str] = None
    voice_samples: List[str] = Field(default_factory=list)
    motivation: Optional[CharacterMotivation] = None
    facets: Optional[CharacterFacets] = None


class Relationship(StoryModel):
    """A directed relationship between two characters."""

    id: int
    source_id: str
    target_id: str
    type: str
    join_reason: Optional[str] = None
    independent_goal: Optional[str] = None


class Location(StoryModel):
    id: str
    name: str
    type: Optional[str] = None
    atmosphere: Optional[str] = None
    significance: Optional[str] = None


class ArcSection(StoryModel):
    name: str
    status: ArcStatus = ArcStatus.PLANNED


class Arc(StoryModel):
    """A story arc with optional sub-sections."""

    id: str
    name: str
    type: str = "main"
    status: ArcStatus = ArcStatus.PLANNED
    sections: List[ArcSection] = Field(default_factory=list)


class Foreshadowing(StoryModel):
    id: str
    content: str
    status: ForeshadowingStatus = ForeshadowingStatus.ACTIVE


class Hook(StoryModel):
    id: str
    content: str
    chapter_id: Optional[int] = None
    strength: Optional[int] = Field(default=None, ge=0, le=100)


class PowerSystem(StoryModel):
    name: str
    levels: List[str] = Field(default_factory=list)
    core_rules: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)


class World(StoryModel):
    """The singleton world record."""

    id: str = "main"
    power_system: Optional[PowerSystem] = None
    social_rules: Dict[str, str] = Field(default_factory=dict)


class StoryBibleDocument(StoryModel):
    """Whole story bible as stored in a JSON file."""

    chapters: List[Chapter] = Field(default_factory=list)
    characters: List[Character] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)
    locations: List[Location] = Field(default_factory=list)
    arcs: List[Arc] = Field(default_factory=list)
    foreshadowing: List[Foreshadowing] = Field(default_factory=list)
    hooks: List[Hook] = Field(default_factory=list)
    world: Optional[World] = None
