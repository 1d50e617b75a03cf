"""
Render story bible entities as readable context text.

Shared by the chapter-scoped and story-wide builders.
"""

from typing import List

from shared.schemas import (
    Arc,
    Character,
    ChapterOutline,
    Foreshadowing,
    Hook,
    Location,
    PowerSystem,
    Relationship,
)


def format_character(character: Character) -> str:
    """
    Format a character sheet.

    Example output:
    ### Lin Feng (main)
    Appearance: tall, scar over left eye
    Motivation:
      Surface: avenge his master
    """
    parts = [f"### {character.name} ({character.role})"]

    if character.appearance:
        parts.append(f"Appearance: {character.appearance}")

    if character.motivation:
        lines = ["Motivation:", f"  Surface: {character.motivation.surface}"]
        if character.motivation.hidden:
            lines.append(f"  Hidden: {character.motivation.hidden}")
        if character.motivation.core:
            lines.append(f"  Core: {character.motivation.core}")
        parts.append("\n".join(lines))

    if character.facets:
        lines = ["Personality:", f"  Public: {character.facets.public}"]
        if character.facets.private:
            lines.append(f"  Private: {character.facets.private}")
        if character.facets.hidden:
            lines.append(f"  Hidden: {character.facets.hidden}")
        if character.facets.under_pressure:
            lines.append(f"  Under pressure: {character.facets.under_pressure}")
        parts.append("\n".join(lines))

    if character.voice_samples:
        samples = "\n".join(f'  "{s}"' for s in character.voice_samples)
        parts.append(f"Voice samples:\n{samples}")

    return "\n".join(parts)


def format_outline(outline: ChapterOutline) -> str:
    """Compose present outline parts; empty string when none are set."""
    parts: List[str] = []
    if outline.goal:
        parts.append(f"Goal: {outline.goal}")
    if outline.scenes:
        scenes = "\n".join(f"  {i + 1}. {scene}" for i, scene in enumerate(outline.scenes))
        parts.append(f"Scenes:\n{scenes}")
    if outline.hook_ending:
        parts.append(f"Ending hook: {outline.hook_ending}")
    return "\n".join(parts)


def format_relationship(relationship: Relationship, source_name: str, target_name: str) -> str:
    parts = [f"{source_name} → {target_name}: {relationship.type}"]
    if relationship.join_reason:
        parts.append(f"  Join reason: {relationship.join_reason}")
    if relationship.independent_goal:
        parts.append(f"  Independent goal: {relationship.independent_goal}")
    return "[Relationship] " + "\n".join(parts)


def format_location(location: Location) -> str:
    parts = [f"### {location.name}"]
    if location.type:
        parts.append(f"Type: {location.type}")
    if location.atmosphere:
        parts.append(f"Atmosphere: {location.atmosphere}")
    if location.significance:
        parts.append(f"Significance: {location.significance}")
    return "\n".join(parts)


def format_arc(arc: Arc) -> str:
    parts = [
        f"### Story arc: {arc.name}",
        f"Type: {arc.type}",
        f"Status: {arc.status}",
    ]
    if arc.sections:
        parts.append("Sections:")
        for section in arc.sections:
            parts.append(f"  - {section.name} ({section.status})")
    return "\n".join(parts)


def format_foreshadowing(foreshadowing: Foreshadowing, label: str) -> str:
    return f"[{label}] {foreshadowing.content} (status: {foreshadowing.status})"


def format_hook(hook: Hook) -> str:
    strength = hook.strength if hook.strength is not None else "unset"
    return f"[Previous chapter hook] {hook.content} (strength: {strength})"


def format_power_system(power_system: PowerSystem) -> str:
    """Power system name, levels, core rules and constraints."""
    parts = [f"### Power system: {power_system.name}"]
    if power_system.levels:
        parts.append(f"Levels: {' → '.join(power_system.levels)}")
    rules = "\n".join(f"  - {rule}" for rule in power_system.core_rules)
    parts.append(f"Core rules:\n{rules}")
    if power_system.constraints:
        constraints = "\n".join(f"  - {c}" for c in power_system.constraints)
        parts.append(f"Constraints:\n{constraints}")
    return "\n".join(parts)


def format_social_rules(social_rules: dict, heading: str = "### Social rules") -> str:
    lines = [heading]
    for key, value in social_rules.items():
        lines.append(f"- {key}: {value}")
    return "\n".join(lines)
