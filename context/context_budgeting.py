"""
Context token budget management.

Treat prompt context as a resource with a budget.

Considerations:
- Model context window limits
- Output tokens reserved for the model's answer
- Fixed prompt scaffolding around the assembled context

Items are selected first-fit in priority order. An item is either
included whole or not at all; content is never sliced.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from shared.config import BudgetConfig

from .token_estimator import TokenEstimator, estimate_tokens

logger = logging.getLogger(__name__)

# Priority tiers, highest = most essential
PRIORITY_REQUIRED = 1000
PRIORITY_FK_EXPANSION = 800
PRIORITY_PLOT_AWARENESS = 600
PRIORITY_WORLD_RULES = 400
PRIORITY_USER_SELECTED = 200


class ContentType(str, Enum):
    """Semantic category of a content item."""

    CHAPTER_CONTENT = "chapter_content"
    CHAPTER_OUTLINE = "chapter_outline"
    CHAPTER_PREV_TAIL = "chapter_prev_tail"
    CHARACTER = "character"
    RELATIONSHIP = "relationship"
    LOCATION = "location"
    ARC = "arc"
    FORESHADOWING = "foreshadowing"
    HOOK = "hook"
    POWER_SYSTEM = "power_system"
    SOCIAL_RULES = "social_rules"
    CUSTOM = "custom"


@dataclass
class ContentItem:
    """One atomic fact rendered as text, tagged with a type and priority."""

    type: str
    content: str
    id: Optional[str] = None
    priority: Optional[int] = None
    size: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.type, Enum):
            self.type = self.type.value


@dataclass
class BudgetedResult:
    """Items that survived truncation."""

    items: List[ContentItem] = field(default_factory=list)
    total_tokens: int = 0
    truncated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "type": item.type,
                    "id": item.id,
                    "content": item.content,
                    "priority": item.priority,
                    "size": item.size,
                }
                for item in self.items
            ],
            "total_tokens": self.total_tokens,
            "truncated": self.truncated,
        }


@dataclass
class ContextBudget:
    """Token budget allocation."""

    total_tokens: int = 1_000_000
    output_reserve_tokens: int = 4_000
    prompt_reserve_tokens: int = 2_000

    @classmethod
    def from_settings(cls, budget_config: BudgetConfig) -> "ContextBudget":
        """Build a budget from the environment-driven BudgetConfig."""
        return cls(
            total_tokens=budget_config.total_tokens,
            output_reserve_tokens=budget_config.output_reserve_tokens,
            prompt_reserve_tokens=budget_config.prompt_reserve_tokens,
        )

    @property
    def available_for_context(self) -> int:
        """Tokens available for assembled context."""
        return max(
            0,
            self.total_tokens
            - self.output_reserve_tokens
            - self.prompt_reserve_tokens,
        )


def _effective_priority(item: ContentItem) -> int:
    if item.priority is None:
        return PRIORITY_USER_SELECTED
    return item.priority


def truncate_to_budget(
    items: Iterable[ContentItem],
    budget: int,
    estimator: TokenEstimator = estimate_tokens,
) -> BudgetedResult:
    """
    Select the priority-respecting subset of items that fits the budget.

    Items are stable-sorted by priority (descending), so items of equal
    priority keep the order they were produced in. The sorted list is walked
    once: an item is kept if it fits in what remains, otherwise it is skipped
    and smaller items after it may still be kept.

    Args:
        items: Candidate content items
        budget: Maximum total size
        estimator: Size function used for items without a known size

    Returns:
        BudgetedResult with included items in selection order

    Raises:
        ValueError: if an item carries a negative size
    """
    ordered = sorted(items, key=_effective_priority, reverse=True)

    included: List[ContentItem] = []
    total = 0
    skipped = 0

    for item in ordered:
        if item.size is None:
            item = replace(item, size=estimator(item.content))
        elif item.size < 0:
            raise ValueError(f"Item {item.id!r} has negative size {item.size}")

        if total + item.size <= budget:
            included.append(item)
            total += item.size
        else:
            skipped += 1
            logger.debug(
                f"Skipped {item.type} item {item.id!r} "
                f"(size={item.size}, used={total}, budget={budget})"
            )

    if skipped:
        logger.info(
            f"Context truncated: kept {len(included)}/{len(ordered)} items, "
            f"{total}/{budget} tokens"
        )

    return BudgetedResult(items=included, total_tokens=total, truncated=skipped > 0)
