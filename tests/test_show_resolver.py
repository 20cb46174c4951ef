import asyncio

from episodic_feed.feed import get_topic_by_id, resolve_show_by_id
from episodic_feed.models.schemas import ShowSource


def test_creator_fields_win_over_catalog(ctx) -> None:
    ctx.store.add_show("show1", "Mine", topic_id="t1")

    resolved = asyncio.run(resolve_show_by_id(ctx, "show1"))

    assert resolved.source == ShowSource.MERGED
    assert resolved.show.title == "Mine"
    assert resolved.show.topic_ids == ["t1"]
    assert resolved.show.creator_id == "creator1"
    assert resolved.debug.curated_from == "catalog"
    assert resolved.debug.title_from == ShowSource.CREATOR
    assert resolved.debug.topics_from == ShowSource.CREATOR


def test_empty_creator_topics_fall_back_to_curated(ctx) -> None:
    ctx.store.add_show("show1", "Mine")

    resolved = asyncio.run(resolve_show_by_id(ctx, "show1"))

    assert resolved.show.title == "Mine"
    assert resolved.show.topic_ids == ["topic1"]
    assert resolved.debug.topics_from == ShowSource.CURATED


def test_published_show_counts_as_curated(ctx, published_item) -> None:
    item = published_item("p1", "e1", show_title="Catalog", show_topic_ids=["t2"])
    ctx.store.add_published_episode(item.episode, item.show)
    ctx.store.add_show("p1", "Mine", topic_id="t1")

    resolved = asyncio.run(resolve_show_by_id(ctx, "p1"))

    assert resolved.source == ShowSource.MERGED
    assert resolved.show.title == "Mine"
    assert resolved.show.topic_ids == ["t1"]
    assert resolved.debug.curated_from == "published"


def test_creator_only_show(ctx) -> None:
    ctx.store.add_show("s9", "Solo", topic_id="t3", topic_name="Drama")

    resolved = asyncio.run(resolve_show_by_id(ctx, "s9"))

    assert resolved.source == ShowSource.CREATOR
    assert resolved.show.title == "Solo"
    assert resolved.show.topic_name == "Drama"
    assert resolved.show.creator_id == ctx.local_creator_id
    assert resolved.debug.has_creator and not resolved.debug.has_curated


def test_curated_only_show(ctx) -> None:
    resolved = asyncio.run(resolve_show_by_id(ctx, "show2"))

    assert resolved.source == ShowSource.CURATED
    assert resolved.show.title == "Fresh Comedy"
    assert resolved.debug.title_from == ShowSource.CURATED
    assert not resolved.debug.has_creator


def test_unknown_show_resolves_to_none(ctx) -> None:
    assert asyncio.run(resolve_show_by_id(ctx, "nope")) is None


def test_topic_lookup_passes_through_to_catalog() -> None:
    assert get_topic_by_id("topic3").name == "Drama"
    assert get_topic_by_id("topic99") is None
