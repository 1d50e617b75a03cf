import random

import pytest

from context.context_budgeting import (
    PRIORITY_FK_EXPANSION,
    PRIORITY_REQUIRED,
    PRIORITY_USER_SELECTED,
    BudgetedResult,
    ContentItem,
    ContentType,
    ContextBudget,
    truncate_to_budget,
)
from shared.config import BudgetConfig


def _item(name: str, priority, size: int) -> ContentItem:
    return ContentItem(type="custom", id=name, content=name, priority=priority, size=size)


def _random_items(rng: random.Random, n: int):
    tiers = [1000, 800, 600, 400, 200]
    return [_item(f"i{k}", rng.choice(tiers), rng.randint(0, 40)) for k in range(n)]


def test_context_budget_available() -> None:
    assert ContextBudget().available_for_context == 994_000
    assert ContextBudget(100, 30, 20).available_for_context == 50
    assert ContextBudget(10, 30, 20).available_for_context == 0


def test_content_type_enum_normalized_to_string() -> None:
    item = ContentItem(type=ContentType.CHARACTER, content="x")
    assert item.type == "character"
    assert type(item.type) is str


def test_everything_fits() -> None:
    items = [_item("a", 800, 5), _item("b", 1000, 5)]
    result = truncate_to_budget(items, 100)

    assert [i.id for i in result.items] == ["b", "a"]
    assert result.total_tokens == 10
    assert result.truncated is False


def test_ties_keep_insertion_order() -> None:
    items = [_item(name, 600, 1) for name in "edcba"]
    result = truncate_to_budget(items, 100)
    assert [i.id for i in result.items] == list("edcba")


def test_skips_oversized_item_and_keeps_evaluating() -> None:
    items = [_item("big", 1000, 90), _item("huge", 800, 50), _item("small", 200, 10)]
    result = truncate_to_budget(items, 100)

    assert [i.id for i in result.items] == ["big", "small"]
    assert result.total_tokens == 100
    assert result.truncated is True


def test_exact_fit_is_not_truncated() -> None:
    result = truncate_to_budget([_item("a", 1000, 60), _item("b", 800, 40)], 100)
    assert result.truncated is False
    assert result.total_tokens == 100


def test_size_computed_when_unknown_without_mutating_input() -> None:
    item = ContentItem(type="custom", content="hello world", priority=PRIORITY_REQUIRED)
    result = truncate_to_budget([item], 10)

    assert result.items[0].size == 2
    assert result.total_tokens == 2
    assert item.size is None


def test_custom_estimator_is_used() -> None:
    item = ContentItem(type="custom", content="abc", priority=PRIORITY_REQUIRED)
    result = truncate_to_budget([item], 10, estimator=len)
    assert result.total_tokens == 3


def test_priority_is_never_changed() -> None:
    items = [_item("a", 1000, 1), _item("b", None, 1), _item("c", 0, 1)]
    result = truncate_to_budget(items, 10)
    assert [i.priority for i in result.items] == [1000, None, 0]


def test_missing_priority_sorts_as_user_selected() -> None:
    items = [_item("none", None, 1), _item("fk", PRIORITY_FK_EXPANSION, 1), _item("user", PRIORITY_USER_SELECTED, 1)]
    result = truncate_to_budget(items, 10)
    assert [i.id for i in result.items] == ["fk", "none", "user"]


def test_zero_budget_keeps_only_empty_items() -> None:
    result = truncate_to_budget([_item("a", 1000, 3), _item("empty", 200, 0)], 0)
    assert [i.id for i in result.items] == ["empty"]
    assert result.truncated is True


def test_empty_input() -> None:
    result = truncate_to_budget([], 100)
    assert result == BudgetedResult(items=[], total_tokens=0, truncated=False)


@pytest.mark.parametrize("seed", range(25))
def test_budget_conservation_and_flag(seed: int) -> None:
    rng = random.Random(seed)
    items = _random_items(rng, rng.randint(0, 30))
    budget = rng.randint(0, 200)

    result = truncate_to_budget(items, budget)

    assert result.total_tokens == sum(i.size for i in result.items)
    assert result.total_tokens <= budget
    assert result.truncated == (len(result.items) < len(items))


@pytest.mark.parametrize("seed", range(25))
def test_higher_tier_only_dropped_when_it_no_longer_fits(seed: int) -> None:
    rng = random.Random(seed)
    items = _random_items(rng, 20)
    budget = rng.randint(20, 150)

    result = truncate_to_budget(items, budget)
    kept = {i.id for i in result.items}

    # Walk order: priority descending, insertion order within a tier
    walk = sorted(items, key=lambda i: -i.priority)
    used = 0
    for item in walk:
        if item.id in kept:
            used += item.size
        else:
            assert used + item.size > budget


def test_to_dict() -> None:
    result = truncate_to_budget([_item("a", 1000, 4)], 10)
    data = result.to_dict()

    assert data["total_tokens"] == 4
    assert data["truncated"] is False
    assert data["items"] == [
        {"type": "custom", "id": "a", "content": "a", "priority": 1000, "size": 4}
    ]


def test_negative_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        truncate_to_budget([_item("a", 1000, 3), _item("bad", 200, -10_000)], 50)


def test_budget_from_settings() -> None:
    config = BudgetConfig(total_tokens=8_000, output_reserve_tokens=1_000, prompt_reserve_tokens=500)
    budget = ContextBudget.from_settings(config)

    assert budget == ContextBudget(8_000, 1_000, 500)
    assert budget.available_for_context == 6_500
