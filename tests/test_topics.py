import asyncio

from episodic_feed.feed import get_episodes_by_topic, get_shows_by_topic


def test_shows_by_topic_from_catalog(ctx) -> None:
    shows = asyncio.run(get_shows_by_topic(ctx, "topic3"))

    assert [show.id for show in shows] == ["show3", "show4"]


def test_shows_by_topic_includes_creator_shows(ctx) -> None:
    ctx.store.add_show("s1", "Mine", topic_id="topic3")
    ctx.store.add_show("s2", "Elsewhere", topic_id="topic2")

    shows = asyncio.run(get_shows_by_topic(ctx, "topic3"))

    assert [show.id for show in shows] == ["show3", "show4", "s1"]


def test_creator_topics_override_catalog_topics(ctx) -> None:
    ctx.store.add_show("show3", "Retitled", topic_id="topic1")

    drama = asyncio.run(get_shows_by_topic(ctx, "topic3"))
    adventure = asyncio.run(get_shows_by_topic(ctx, "topic1"))

    assert [show.id for show in drama] == ["show4"]
    assert "show3" in [show.id for show in adventure]


def test_episodes_by_show_topic(ctx) -> None:
    episodes = asyncio.run(get_episodes_by_topic(ctx, "topic4"))

    assert [item.episode.id for item in episodes] == ["ep7", "ep8"]


def test_episodes_by_episode_level_topic(ctx, published_item) -> None:
    item = published_item("s1", "e1")
    tagged = item.model_copy(update={"episode": item.episode.model_copy(update={"topic_ids": ["topic9"]})})
    ctx.store.add_local_published_episode("s1", tagged)

    episodes = asyncio.run(get_episodes_by_topic(ctx, "topic9"))

    assert [item.episode.id for item in episodes] == ["e1"]


def test_local_publication_appears_once(ctx, published_item) -> None:
    item = published_item("s1", "e1", show_topic_ids=["topic2"])
    ctx.store.add_published_episode(item.episode, item.show)
    ctx.store.add_local_published_episode("s1", item)

    ids = [item.episode.id for item in asyncio.run(get_episodes_by_topic(ctx, "topic2"))]

    assert ids.count("e1") == 1
    assert {"ep2", "ep5"} <= set(ids)


def test_unknown_topic_is_empty(ctx) -> None:
    assert asyncio.run(get_shows_by_topic(ctx, "nope")) == []
    assert asyncio.run(get_episodes_by_topic(ctx, "nope")) == []
