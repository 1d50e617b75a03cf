"""
Chapter-scoped context assembly.

Assembles context from a chapter's foreign-key references in five layers:

    L1 (1000) Required        chapter text, outline, previous chapter ending
    L2 (800)  FK expansion    characters, relationships, locations, arc
    L3 (600)  Plot awareness  hinted + active foreshadowing, previous hooks
    L4 (400)  World rules     power system, social rules
    L5 (200)  User-selected   items passed by the caller

Only the chapter itself is required. Every other reference is best-effort:
unresolved entities are left out silently. When the budget is exceeded,
lower layers are dropped first.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from shared.config import settings
from shared.errors import EntityNotFoundError
from shared.schemas import Chapter
from story_bible.ports import StorySources

from .context_budgeting import (
    PRIORITY_FK_EXPANSION,
    PRIORITY_PLOT_AWARENESS,
    PRIORITY_REQUIRED,
    PRIORITY_USER_SELECTED,
    PRIORITY_WORLD_RULES,
    BudgetedResult,
    ContentItem,
    ContentType,
    ContextBudget,
    truncate_to_budget,
)
from .entity_formatting import (
    format_arc,
    format_character,
    format_foreshadowing,
    format_hook,
    format_location,
    format_outline,
    format_power_system,
    format_relationship,
    format_social_rules,
)
from .token_estimator import TokenEstimator, get_token_estimator

logger = logging.getLogger(__name__)


class ChapterContextBuilder:
    """
    Build the context for writing or revising one chapter.

    Usage:
        builder = ChapterContextBuilder(bible.as_sources())
        result = builder.build(12)
        prompt_context = format_context(result.items)
    """

    def __init__(
        self,
        sources: StorySources,
        budget: ContextBudget = None,
        estimator: TokenEstimator = None,
        prev_tail_chars: int = None,
    ):
        """
        Args:
            sources: Read capabilities over the story bible
            budget: Token budget (default: from settings)
            estimator: Size function (default: strategy named in settings)
            prev_tail_chars: Length of the previous chapter excerpt (0 disables it)

        Raises:
            ValueError: if prev_tail_chars is negative
        """
        self.sources = sources
        self.budget = budget or ContextBudget.from_settings(settings.budget)
        self.estimator = estimator or get_token_estimator(settings.context.token_estimator)
        self.prev_tail_chars = (
            prev_tail_chars if prev_tail_chars is not None else settings.context.prev_tail_chars
        )
        if self.prev_tail_chars < 0:
            raise ValueError(f"prev_tail_chars must be >= 0, got {self.prev_tail_chars}")

    def build(
        self,
        chapter_id: int,
        additional_items: Optional[Sequence[ContentItem]] = None,
    ) -> BudgetedResult:
        """
        Build context for a chapter.

        Args:
            chapter_id: Chapter to build context for
            additional_items: User-selected items (layer 5)

        Returns:
            BudgetedResult with surviving items, their size and truncation flag

        Raises:
            EntityNotFoundError: if the chapter does not exist
        """
        chapter = self.sources.chapters.find_chapter_with_content(chapter_id)
        if chapter is None:
            raise EntityNotFoundError("Chapter", chapter_id)

        # Used by both L1 (ending excerpt) and L3 (hooks)
        prev_chapter = self._get_previous_chapter(chapter)

        layers = [
            ("required", self._build_required(chapter, prev_chapter)),
            ("fk_expansion", self._build_fk_expansion(chapter)),
            ("plot_awareness", self._build_plot_awareness(chapter, prev_chapter)),
            ("world_rules", self._build_world_rules()),
            ("user_selected", self._build_user_selected(additional_items)),
        ]

        items: List[ContentItem] = []
        for name, layer_items in layers:
            logger.debug(f"Chapter {chapter_id} layer {name}: {len(layer_items)} items")
            items.extend(layer_items)

        result = truncate_to_budget(
            items, self.budget.available_for_context, estimator=self.estimator
        )

        logger.info(
            f"Built context for chapter {chapter_id}: {len(result.items)}/{len(items)} items, "
            f"{result.total_tokens} tokens, truncated={result.truncated}"
        )
        return result

    # Layers

    def _build_required(
        self, chapter: Chapter, prev_chapter: Optional[Chapter]
    ) -> List[ContentItem]:
        """L1: chapter text, composed outline, previous chapter ending."""
        items: List[ContentItem] = []

        if chapter.content:
            items.append(
                ContentItem(
                    type=ContentType.CHAPTER_CONTENT,
                    id=str(chapter.id),
                    content=chapter.content,
                    priority=PRIORITY_REQUIRED,
                )
            )

        if chapter.outline:
            outline = format_outline(chapter.outline)
            if outline:
                items.append(
                    ContentItem(
                        type=ContentType.CHAPTER_OUTLINE,
                        id=str(chapter.id),
                        content=outline,
                        priority=PRIORITY_REQUIRED,
                    )
                )

        if prev_chapter and prev_chapter.content and self.prev_tail_chars > 0:
            tail = prev_chapter.content[-self.prev_tail_chars:]
            items.append(
                ContentItem(
                    type=ContentType.CHAPTER_PREV_TAIL,
                    id=f"prev-{prev_chapter.id}",
                    content=f"[Previous chapter ending]\n{tail}",
                    priority=PRIORITY_REQUIRED,
                )
            )

        return items

    def _build_fk_expansion(self, chapter: Chapter) -> List[ContentItem]:
        """L2: characters, scoped relationships, locations, arc (in that order)."""
        items: List[ContentItem] = []

        if chapter.characters:
            characters = self.sources.characters.find_by_ids(chapter.characters)
            names = {c.id: c.name for c in characters}

            for character in characters:
                items.append(
                    ContentItem(
                        type=ContentType.CHARACTER,
                        id=character.id,
                        content=format_character(character),
                        priority=PRIORITY_FK_EXPANSION,
                    )
                )

            for rel in self.sources.relationships.find_scoped(chapter.characters):
                source_name = names.get(rel.source_id)
                target_name = names.get(rel.target_id)
                if source_name is None or target_name is None:
                    logger.debug(f"Relationship {rel.id} has an unresolved endpoint, skipped")
                    continue
                items.append(
                    ContentItem(
                        type=ContentType.RELATIONSHIP,
                        id=f"rel-{rel.id}",
                        content=format_relationship(rel, source_name, target_name),
                        priority=PRIORITY_FK_EXPANSION,
                    )
                )

        if chapter.locations:
            for location in self.sources.locations.find_by_ids(chapter.locations):
                items.append(
                    ContentItem(
                        type=ContentType.LOCATION,
                        id=location.id,
                        content=format_location(location),
                        priority=PRIORITY_FK_EXPANSION,
                    )
                )

        if chapter.arc_id:
            arc = self.sources.arcs.find_by_id(chapter.arc_id)
            if arc:
                items.append(
                    ContentItem(
                        type=ContentType.ARC,
                        id=arc.id,
                        content=format_arc(arc),
                        priority=PRIORITY_FK_EXPANSION,
                    )
                )
            else:
                logger.debug(f"Arc {chapter.arc_id} of chapter {chapter.id} not found")

        return items

    def _build_plot_awareness(
        self, chapter: Chapter, prev_chapter: Optional[Chapter]
    ) -> List[ContentItem]:
        """L3: hinted foreshadowing, other active foreshadowing, previous hooks."""
        items: List[ContentItem] = []

        # A foreshadowing entity is represented once: hinted wins over active
        seen = set()

        if chapter.foreshadowing_hinted:
            for fs in self.sources.foreshadowing.find_by_ids(chapter.foreshadowing_hinted):
                if fs.id in seen:
                    continue
                seen.add(fs.id)
                items.append(
                    ContentItem(
                        type=ContentType.FORESHADOWING,
                        id=fs.id,
                        content=format_foreshadowing(fs, "Hinted foreshadowing"),
                        priority=PRIORITY_PLOT_AWARENESS,
                    )
                )

        for fs in self.sources.foreshadowing.find_active():
            if fs.id in seen or fs.id in chapter.foreshadowing_hinted:
                continue
            seen.add(fs.id)
            items.append(
                ContentItem(
                    type=ContentType.FORESHADOWING,
                    id=fs.id,
                    content=format_foreshadowing(fs, "Active foreshadowing"),
                    priority=PRIORITY_PLOT_AWARENESS,
                )
            )

        if prev_chapter:
            for hook in self.sources.hooks.find_by_chapter(prev_chapter.id):
                items.append(
                    ContentItem(
                        type=ContentType.HOOK,
                        id=hook.id,
                        content=format_hook(hook),
                        priority=PRIORITY_PLOT_AWARENESS,
                    )
                )

        return items

    def _build_world_rules(self) -> List[ContentItem]:
        """L4: power system core rules and social rules."""
        items: List[ContentItem] = []

        world = self.sources.world.get()
        if world is None:
            return items

        if world.power_system and world.power_system.core_rules:
            items.append(
                ContentItem(
                    type=ContentType.POWER_SYSTEM,
                    id="power-system",
                    content=format_power_system(world.power_system),
                    priority=PRIORITY_WORLD_RULES,
                )
            )

        if world.social_rules:
            items.append(
                ContentItem(
                    type=ContentType.SOCIAL_RULES,
                    id="social-rules",
                    content=format_social_rules(world.social_rules),
                    priority=PRIORITY_WORLD_RULES,
                )
            )

        return items

    def _build_user_selected(
        self, additional_items: Optional[Sequence[ContentItem]]
    ) -> List[ContentItem]:
        """
        L5: caller items; only a missing priority is filled in.

        Sizes are always re-estimated from the content.
        """
        if not additional_items:
            return []

        return [
            replace(
                item,
                priority=item.priority if item.priority is not None else PRIORITY_USER_SELECTED,
                size=None,
            )
            for item in additional_items
        ]

    # Helpers

    def _get_previous_chapter(self, chapter: Chapter) -> Optional[Chapter]:
        """
        Find the chapter immediately before the given one, with its text.

        Uses the volume's ordering when the chapter belongs to a volume,
        otherwise the global ordering by id.
        """
        if chapter.volume_id is not None:
            chapters = self.sources.chapters.find_chapters_by_volume(chapter.volume_id)
        else:
            chapters = self.sources.chapters.find_all_chapters()

        ids = [c.id for c in chapters]
        if chapter.id not in ids:
            return None

        idx = ids.index(chapter.id)
        if idx == 0:
            return None

        return self.sources.chapters.find_chapter_with_content(ids[idx - 1])
