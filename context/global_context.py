"""
Story-wide context assembly.

Builds context from every story bible entity rather than one chapter's
references. Two modes:
- build_full(): every entity with key attributes, one item per category
- build_summary(): names and statuses only, one line per category

Both use the same token budget and truncation as the chapter builder.
"""

import logging
from typing import List

from shared.config import settings
from story_bible.ports import StorySources

from .context_budgeting import (
    PRIORITY_FK_EXPANSION,
    PRIORITY_PLOT_AWARENESS,
    PRIORITY_WORLD_RULES,
    BudgetedResult,
    ContentItem,
    ContentType,
    ContextBudget,
    truncate_to_budget,
)
from .entity_formatting import format_social_rules
from .token_estimator import TokenEstimator, get_token_estimator

logger = logging.getLogger(__name__)


class GlobalContextBuilder:
    """
    Build context with story-wide awareness (no chapter scoping).

    Usage:
        builder = GlobalContextBuilder(bible.as_sources())
        full = builder.build_full()        # answering questions about the story
        summary = builder.build_summary()  # brainstorming
    """

    def __init__(
        self,
        sources: StorySources,
        budget: ContextBudget = None,
        estimator: TokenEstimator = None,
    ):
        self.sources = sources
        self.budget = budget or ContextBudget.from_settings(settings.budget)
        self.estimator = estimator or get_token_estimator(settings.context.token_estimator)

    def build_full(self) -> BudgetedResult:
        """Comprehensive context: all entities with moderate detail."""
        items: List[ContentItem] = []

        characters = self.sources.characters.find_all()
        if characters:
            lines = []
            for c in characters:
                lines.append(f"- {c.name} ({c.role})")
                if c.motivation and c.motivation.surface:
                    lines.append(f"  Motivation: {c.motivation.surface}")
                if c.facets and c.facets.public:
                    lines.append(f"  Personality: {c.facets.public}")
            items.append(
                ContentItem(
                    type=ContentType.CHARACTER,
                    id="global-characters",
                    content="## Characters\n" + "\n".join(lines),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        relationships = self.sources.relationships.find_all()
        if relationships:
            names = {c.id: c.name for c in characters}
            lines = [
                f"- {names.get(r.source_id, r.source_id)} → "
                f"{names.get(r.target_id, r.target_id)}: {r.type}"
                for r in relationships
            ]
            items.append(
                ContentItem(
                    type=ContentType.RELATIONSHIP,
                    id="global-relationships",
                    content="## Relationships\n" + "\n".join(lines),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        arcs = self.sources.arcs.find_all()
        if arcs:
            items.append(
                ContentItem(
                    type=ContentType.ARC,
                    id="global-arcs",
                    content="## Story arcs\n"
                    + "\n".join(f"- {a.name} ({a.type}, {a.status})" for a in arcs),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        locations = self.sources.locations.find_all()
        if locations:
            items.append(
                ContentItem(
                    type=ContentType.LOCATION,
                    id="global-locations",
                    content="## Locations\n"
                    + "\n".join(
                        f"- {loc.name}" + (f" ({loc.type})" if loc.type else "")
                        for loc in locations
                    ),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        foreshadowing = self.sources.foreshadowing.find_all()
        if foreshadowing:
            items.append(
                ContentItem(
                    type=ContentType.FORESHADOWING,
                    id="global-foreshadowing",
                    content="## Foreshadowing\n"
                    + "\n".join(f"- {f.content} ({f.status})" for f in foreshadowing),
                    priority=PRIORITY_PLOT_AWARENESS,
                )
            )

        world = self.sources.world.get()
        if world and world.power_system:
            parts = [f"## Power system: {world.power_system.name}"]
            if world.power_system.core_rules:
                parts.append(f"Core rules: {', '.join(world.power_system.core_rules)}")
            items.append(
                ContentItem(
                    type=ContentType.POWER_SYSTEM,
                    id="global-power-system",
                    content="\n".join(parts),
                    priority=PRIORITY_WORLD_RULES,
                )
            )
        if world and world.social_rules:
            items.append(
                ContentItem(
                    type=ContentType.SOCIAL_RULES,
                    id="global-social-rules",
                    content=format_social_rules(world.social_rules, heading="## Social rules"),
                    priority=PRIORITY_WORLD_RULES,
                )
            )

        return self._finish("full", items)

    def build_summary(self) -> BudgetedResult:
        """Lightweight context: names and statuses only."""
        items: List[ContentItem] = []

        characters = self.sources.characters.find_all()
        if characters:
            items.append(
                ContentItem(
                    type=ContentType.CHARACTER,
                    id="summary-characters",
                    content="Characters: " + ", ".join(f"{c.name}({c.role})" for c in characters),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        arcs = self.sources.arcs.find_all()
        if arcs:
            items.append(
                ContentItem(
                    type=ContentType.ARC,
                    id="summary-arcs",
                    content="Story arcs: " + ", ".join(f"{a.name}({a.status})" for a in arcs),
                    priority=PRIORITY_FK_EXPANSION,
                )
            )

        active = self.sources.foreshadowing.find_active()
        if active:
            items.append(
                ContentItem(
                    type=ContentType.FORESHADOWING,
                    id="summary-foreshadowing",
                    content="Active foreshadowing: " + "; ".join(f.content for f in active),
                    priority=PRIORITY_PLOT_AWARENESS,
                )
            )

        return self._finish("summary", items)

    def _finish(self, mode: str, items: List[ContentItem]) -> BudgetedResult:
        result = truncate_to_budget(
            items, self.budget.available_for_context, estimator=self.estimator
        )
        logger.info(
            f"Built global {mode} context: {len(result.items)}/{len(items)} items, "
            f"{result.total_tokens} tokens, truncated={result.truncated}"
        )
        return result
