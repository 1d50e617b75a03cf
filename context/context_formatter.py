"""
Render budgeted content items as one structured prompt block.

Items are grouped into a fixed sequence of named sections with lightweight
markdown headings for the LLM. Empty sections are never emitted. Item types
no section claims land in the catch-all "Additional Information" section.
"""

from typing import Dict, Iterable, List, Tuple

from .context_budgeting import ContentItem, ContentType

CONTEXT_START = "<context>"
CONTEXT_END = "</context>"

CATCH_ALL_SECTION = "Additional Information"

# (heading, member types) in output order
SECTIONS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Current Chapter", (ContentType.CHAPTER_CONTENT.value,)),
    ("Continuity Excerpt", (ContentType.CHAPTER_PREV_TAIL.value,)),
    ("Chapter Outline", (ContentType.CHAPTER_OUTLINE.value, ContentType.ARC.value)),
    ("Character Profiles", (ContentType.CHARACTER.value, ContentType.RELATIONSHIP.value)),
    (
        "World Rules",
        (
            ContentType.LOCATION.value,
            ContentType.POWER_SYSTEM.value,
            ContentType.SOCIAL_RULES.value,
        ),
    ),
    ("Plot Threads", (ContentType.FORESHADOWING.value, ContentType.HOOK.value)),
    (CATCH_ALL_SECTION, (ContentType.CUSTOM.value,)),
]

_SECTION_BY_TYPE: Dict[str, str] = {
    item_type: heading for heading, types in SECTIONS for item_type in types
}


def format_context(items: Iterable[ContentItem]) -> str:
    """
    Format content items into sectioned context text.

    Example output:
    <context>
    ## Current Chapter
    ...

    ## Character Profiles
    ### Lin Feng (main)
    ...
    </context>

    Args:
        items: Items in the order they should appear within each section

    Returns:
        Context block wrapped in <context> delimiters
    """
    grouped: Dict[str, List[str]] = {heading: [] for heading, _ in SECTIONS}
    for item in items:
        heading = _SECTION_BY_TYPE.get(item.type, CATCH_ALL_SECTION)
        grouped[heading].append(item.content)

    sections = [
        f"## {heading}\n" + "\n\n".join(grouped[heading])
        for heading, _ in SECTIONS
        if grouped[heading]
    ]

    return f"{CONTEXT_START}\n" + "\n\n".join(sections) + f"\n{CONTEXT_END}"
