from context import ChapterContextBuilder, ContentItem, ContextBudget, format_context
from context.context_formatter import SECTIONS


def _item(item_type: str, content: str) -> ContentItem:
    return ContentItem(type=item_type, content=content, priority=1000)


def test_empty_input_is_just_delimiters() -> None:
    assert format_context([]) == "<context>\n\n</context>"


def test_sections_follow_fixed_order_not_input_order() -> None:
    items = [
        _item("hook", "Hook A"),
        _item("character", "Char A"),
        _item("chapter_content", "Body"),
        _item("character", "Char B"),
    ]
    assert format_context(items) == (
        "<context>\n"
        "## Current Chapter\nBody\n\n"
        "## Character Profiles\nChar A\n\nChar B\n\n"
        "## Plot Threads\nHook A\n"
        "</context>"
    )


def test_empty_sections_are_never_emitted() -> None:
    text = format_context([_item("location", "Azure Gate")])
    headings = [line for line in text.splitlines() if line.startswith("## ")]
    assert headings == ["## World Rules"]


def test_unrecognized_types_go_to_catch_all() -> None:
    items = [_item("custom", "User note"), _item("timeline_event", "Battle of the pass")]
    assert format_context(items) == (
        "<context>\n## Additional Information\nUser note\n\nBattle of the pass\n</context>"
    )


def test_grouped_types_share_a_section() -> None:
    items = [_item("arc", "Arc"), _item("chapter_outline", "Outline"), _item("chapter_prev_tail", "Tail")]
    text = format_context(items)

    assert "## Continuity Excerpt\nTail" in text
    assert "## Chapter Outline\nArc\n\nOutline" in text
    assert text.index("## Continuity Excerpt") < text.index("## Chapter Outline")


def test_every_defined_type_has_a_section() -> None:
    types = [t for _, members in SECTIONS for t in members]
    assert len(types) == len(set(types))
    assert set(types) == {
        "chapter_content",
        "chapter_prev_tail",
        "chapter_outline",
        "arc",
        "character",
        "relationship",
        "location",
        "power_system",
        "social_rules",
        "foreshadowing",
        "hook",
        "custom",
    }


def test_formats_a_built_chapter_context(sources) -> None:
    budget = ContextBudget(total_tokens=1_000_000, output_reserve_tokens=0, prompt_reserve_tokens=0)
    result = ChapterContextBuilder(sources, budget=budget).build(1)
    text = format_context(result.items)

    assert text.startswith("<context>\n## Current Chapter\n")
    assert text.endswith("\n</context>")
    assert "## Continuity Excerpt" not in text
    assert "## Plot Threads" in text
    assert "## World Rules" in text
