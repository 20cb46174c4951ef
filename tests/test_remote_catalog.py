import asyncio
import logging

import httpx

from episodic_feed.feed import FeedContext, get_show_episodes
from episodic_feed.models.schemas import FeedType
from episodic_feed.services.kv_store import InMemoryStore
from episodic_feed.services.publication_store import PublicationStore
from episodic_feed.services.remote_catalog import RemoteCatalog


def _row(episode_id: str, show_id: str, season=None, number=None, title=None) -> dict:
    return {
        "episode": {
            "id": episode_id,
            "show_id": show_id,
            "season_number": season,
            "episode_number": number,
            "title": title,
            "created_at": "2025-05-01T00:00:00Z",
            "published_at": "2025-05-01T00:00:00Z",
        },
        "show": {"id": show_id, "title": "Remote Show", "creator_id": "remote", "topic_ids": ["topic2"]},
    }


class RecordingHandler:
    def __init__(self, respond) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def _catalog(handler) -> RemoteCatalog:
    return RemoteCatalog(base_url="https://catalog.test/api/", transport=httpx.MockTransport(handler))


def test_fetches_and_normalizes_feed() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, json=[_row("r1", "rs1")]))
    catalog = _catalog(handler)

    items = asyncio.run(catalog.get_feed(FeedType.NEW_SHOWS_ONLY))

    assert str(handler.requests[0].url) == "https://catalog.test/api/feeds/newShowsOnly"
    assert [item.episode.id for item in items] == ["r1"]
    assert items[0].episode.season_number == 1
    assert items[0].episode.episode_number == 0
    assert items[0].episode.title == "Untitled Episode"
    assert not catalog.fuse_tripped


def test_continue_feed_is_reduced_to_resume_items() -> None:
    rows = [_row("a1", "rs1", 1, 1), _row("a3", "rs1", 1, 3), _row("a2", "rs1", 1, 2), _row("b1", "rs2", 2, 1)]
    handler = RecordingHandler(lambda request: httpx.Response(200, json=rows))

    items = asyncio.run(_catalog(handler).get_feed("continue"))

    assert [item.episode.id for item in items] == ["a3", "b1"]


def test_server_error_trips_fuse_once(caplog) -> None:
    handler = RecordingHandler(lambda request: httpx.Response(500))
    catalog = _catalog(handler)

    with caplog.at_level(logging.WARNING, logger="episodic_feed.services.remote_catalog"):
        first = asyncio.run(catalog.get_feed(FeedType.NEW))
        second = asyncio.run(catalog.get_feed(FeedType.LIBRARY))

    assert catalog.fuse_tripped
    assert len(handler.requests) == 1
    assert [item.episode.id for item in first] == ["ep1", "ep3", "ep2"]
    assert len(second) == 11
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1


def test_malformed_payload_falls_back() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, json=[{"episode": {"id": "x"}}]))
    catalog = _catalog(handler)

    items = asyncio.run(catalog.get_feed(FeedType.LOCAL))

    assert catalog.fuse_tripped
    assert [item.episode.id for item in items] == ["ep7", "ep8"]


def test_invalid_json_falls_back() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, content=b"<html>"))
    catalog = _catalog(handler)

    items = asyncio.run(catalog.get_feed(FeedType.LOCAL))

    assert catalog.fuse_tripped
    assert len(items) == 2


def test_timeout_falls_back() -> None:
    def respond(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    catalog = _catalog(RecordingHandler(respond))

    items = asyncio.run(catalog.get_feed(FeedType.NEW))

    assert catalog.fuse_tripped
    assert len(items) == 3


def test_empty_base_url_serves_mock_without_requests() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, json=[]))
    catalog = RemoteCatalog(base_url="", transport=httpx.MockTransport(handler))

    items = asyncio.run(catalog.get_feed(FeedType.NEW))

    assert len(items) == 3
    assert handler.requests == []
    assert not catalog.fuse_tripped


def test_unknown_feed_type_skips_network() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, json=[]))
    catalog = _catalog(handler)

    assert asyncio.run(catalog.get_feed("trending")) == []
    assert handler.requests == []


def test_concurrent_failures_warn_once(caplog) -> None:
    async def respond(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        return httpx.Response(503)

    catalog = _catalog(RecordingHandler(respond))
    ctx = FeedContext(catalog=catalog, store=PublicationStore(kv=InMemoryStore()))

    with caplog.at_level(logging.WARNING, logger="episodic_feed.services.remote_catalog"):
        episodes = asyncio.run(get_show_episodes(ctx, "show3"))

    assert catalog.fuse_tripped
    assert [item.episode.episode_number for item in episodes] == list(range(1, 13))
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
