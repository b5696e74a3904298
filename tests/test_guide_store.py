"""Tests for guide persistence."""
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.errors import GuideNotFoundError, ImmutableFieldError, InvalidPatchError
from app.services.guide_store import GuideService
from tests.conftest import make_guide


@pytest.mark.asyncio
async def test_save_and_get_round_trip(db_session: AsyncSession):
    store = GuideService(db_session)
    guide = make_guide()

    await store.save_guide(guide)
    loaded = await store.get_guide(guide.id)

    assert loaded == guide


@pytest.mark.asyncio
async def test_get_unknown_id_raises_not_found(db_session: AsyncSession):
    with pytest.raises(GuideNotFoundError):
        await GuideService(db_session).get_guide("guide_missing")


@pytest.mark.asyncio
async def test_list_newest_first(db_session: AsyncSession):
    store = GuideService(db_session)
    for day, guide_id in [(1, "guide_a"), (3, "guide_c"), (2, "guide_b")]:
        await store.save_guide(
            make_guide(id=guide_id, created_at=datetime(2026, 3, day, tzinfo=timezone.utc))
        )

    guides = await store.list_guides()
    assert [g.id for g in guides] == ["guide_c", "guide_b", "guide_a"]


@pytest.mark.asyncio
async def test_delete(db_session: AsyncSession):
    store = GuideService(db_session)
    guide = make_guide()
    await store.save_guide(guide)

    await store.delete_guide(guide.id)

    with pytest.raises(GuideNotFoundError):
        await store.get_guide(guide.id)


@pytest.mark.asyncio
async def test_delete_unknown_id_raises_not_found(db_session: AsyncSession):
    with pytest.raises(GuideNotFoundError):
        await GuideService(db_session).delete_guide("guide_missing")


@pytest.mark.asyncio
async def test_update_recomputes_metadata(db_session: AsyncSession):
    store = GuideService(db_session)
    guide = make_guide()
    await store.save_guide(guide)

    updated = await store.update_guide(guide.id, {"content": " ".join(["w"] * 450)})

    assert updated.metadata.word_count == 450
    assert updated.metadata.reading_time == 3
    assert updated.id == guide.id
    assert updated.created_at == guide.created_at
    assert updated.title == guide.title
    assert (await store.get_guide(guide.id)).content == updated.content


@pytest.mark.asyncio
async def test_update_nested_fields(db_session: AsyncSession):
    store = GuideService(db_session)
    guide = make_guide()
    await store.save_guide(guide)

    updated = await store.update_guide(
        guide.id,
        {
            "outline": ["One", "Two"],
            "preferences": {**guide.preferences.model_dump(mode="json"), "tone": "technical"},
            "sources": [{"title": "Only", "url": "https://only.example"}],
        },
    )

    assert updated.outline == ["One", "Two"]
    assert updated.preferences.tone.value == "technical"
    assert [s.url for s in updated.sources] == ["https://only.example"]


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["id", "created_at"])
async def test_update_rejects_immutable_fields(db_session: AsyncSession, field):
    store = GuideService(db_session)
    guide = make_guide()
    await store.save_guide(guide)

    with pytest.raises(ImmutableFieldError):
        await store.update_guide(guide.id, {field: "x", "title": "New"})

    assert (await store.get_guide(guide.id)).title == guide.title


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "updates",
    [
        {"metadata": {"word_count": 1, "reading_time": 1}},
        {"title": None},
        {"preferences": {"tone": "shouty"}},
    ],
)
async def test_update_rejects_invalid_patches(db_session: AsyncSession, updates):
    store = GuideService(db_session)
    guide = make_guide()
    await store.save_guide(guide)

    with pytest.raises(InvalidPatchError):
        await store.update_guide(guide.id, updates)


@pytest.mark.asyncio
async def test_update_unknown_id_raises_not_found(db_session: AsyncSession):
    with pytest.raises(GuideNotFoundError):
        await GuideService(db_session).update_guide("guide_missing", {"title": "x"})
