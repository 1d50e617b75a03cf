"""
Context Assembly Module.

Treat prompt context as a resource with a budget.

This module handles:
- Token estimation for mixed CJK/Latin story text
- Priority-tiered truncation to a hard token budget
- Chapter-scoped context (five layers over a chapter's references)
- Story-wide context (full or summary)
- Sectioned formatting for prompt injection

Best practices:
- Higher tiers always win when the budget is tight
- Items are included whole or not at all
- Every context is built fresh per request

Usage:
    from context import ChapterContextBuilder, format_context

    result = ChapterContextBuilder(bible.as_sources()).build(chapter_id=3)
    prompt_context = format_context(result.items)
"""

from .chapter_context import ChapterContextBuilder
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
from .context_formatter import format_context
from .global_context import GlobalContextBuilder
from .token_estimator import count_tokens_tiktoken, estimate_tokens, get_token_estimator

__all__ = [
    "ChapterContextBuilder",
    "GlobalContextBuilder",
    "format_context",
    "estimate_tokens",
    "count_tokens_tiktoken",
    "get_token_estimator",
    "truncate_to_budget",
    "ContentItem",
    "ContentType",
    "BudgetedResult",
    "ContextBudget",
    "PRIORITY_REQUIRED",
    "PRIORITY_FK_EXPANSION",
    "PRIORITY_PLOT_AWARENESS",
    "PRIORITY_WORLD_RULES",
    "PRIORITY_USER_SELECTED",
]
