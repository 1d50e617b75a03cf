import pytest

from shared.schemas import (
    Arc,
    ArcSection,
    Chapter,
    ChapterOutline,
    Character,
    CharacterFacets,
    CharacterMotivation,
    Foreshadowing,
    Hook,
    Location,
    PowerSystem,
    Relationship,
    World,
)
from story_bible import InMemoryStoryBible

PREV_CHAPTER_TEXT = "雨夜。" + "The storm broke over the valley. " * 30 + "Lin Feng waited at the gate."


@pytest.fixture
def bible() -> InMemoryStoryBible:
    b = InMemoryStoryBible()

    b.add_chapter(
        Chapter(id=1, volume_id=1, sort_order=1, title="Storm", content=PREV_CHAPTER_TEXT)
    )
    b.add_chapter(
        Chapter(
            id=2,
            volume_id=1,
            sort_order=2,
            arc_id="ARC001",
            title="The Gate",
            content="林风推开了大门。 Mei followed him inside.",
            outline=ChapterOutline(
                goal="Reach the inner sect",
                scenes=["Gate trial", "Meeting the elder"],
                hook_ending="The elder knows his name",
            ),
            characters=["C001", "C002", "C404"],
            locations=["L001", "L404"],
            foreshadowing_hinted=["FS001"],
        )
    )
    # No volume: previous chapter comes from the global ordering by id
    b.add_chapter(Chapter(id=3, content="Morning came.", characters=["C003"]))

    b.add_character(
        Character(
            id="C001",
            name="Lin Feng",
            role="main",
            appearance="Tall, scar over the left eye",
            motivation=CharacterMotivation(surface="Avenge his master", core="Belonging"),
            facets=CharacterFacets(public="Calm", under_pressure="Reckless"),
            voice_samples=["I keep my promises."],
        )
    )
    b.add_character(Character(id="C002", name="Mei", role="supporting"))
    b.add_character(Character(id="C003", name="Old Wu", role="mentioned"))

    b.add_relationship(
        Relationship(
            id=1,
            source_id="C001",
            target_id="C002",
            type="companion",
            join_reason="Saved from bandits",
        )
    )
    b.add_relationship(Relationship(id=2, source_id="C001", target_id="C003", type="mentor"))
    b.add_relationship(Relationship(id=3, source_id="C002", target_id="C404", type="rival"))

    b.add_location(
        Location(id="L001", name="Azure Gate", type="sect", atmosphere="Solemn")
    )

    b.add_arc(
        Arc(
            id="ARC001",
            name="Entering the Sect",
            type="main",
            status="in_progress",
            sections=[
                ArcSection(name="Trial", status="complete"),
                ArcSection(name="Apprenticeship", status="planned"),
            ],
        )
    )

    b.add_foreshadowing(Foreshadowing(id="FS001", content="The jade pendant glows"))
    b.add_foreshadowing(Foreshadowing(id="FS002", content="The elder's missing finger"))
    b.add_foreshadowing(
        Foreshadowing(id="FS003", content="The burned letter", status="resolved")
    )

    b.add_hook(Hook(id="H001", chapter_id=1, content="Someone is watching", strength=80))
    b.add_hook(Hook(id="H002", chapter_id=1, content="A bell rings twice"))

    b.set_world(
        World(
            power_system=PowerSystem(
                name="Qi Cultivation",
                levels=["Qi Gathering", "Foundation", "Core"],
                core_rules=["Qi cannot be created, only gathered"],
                constraints=["Breakthroughs need seclusion"],
            ),
            social_rules={"Sect hierarchy": "Elders outrank disciples"},
        )
    )
    return b


@pytest.fixture
def sources(bible):
    return bible.as_sources()
