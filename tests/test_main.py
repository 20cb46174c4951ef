import asyncio
import json

from episodic_feed.main import _to_jsonable, build_parser, run_command
from episodic_feed.models.schemas import ShowSource


def _run(tmp_path, *argv):
    args = build_parser().parse_args(["--store-dir", str(tmp_path), *argv])
    return asyncio.run(run_command(args))


def test_create_show_then_publish_and_list(tmp_path) -> None:
    created = _run(tmp_path, "create-show", "s1", "Mine", "--topic-id", "topic2")
    assert created.topic_ids == ["topic2"]

    published = _run(tmp_path, "publish", "s1", "Pilot")
    assert published.episode.id == "pub-s1-1-1"
    assert published.show.title == "Mine"

    timeline = _run(tmp_path, "episodes", "s1")
    assert [entry.id for entry in timeline] == ["pub-s1-1-1"]

    resolved = _run(tmp_path, "show", "s1")
    assert resolved.source == ShowSource.MERGED
    assert resolved.debug.curated_from == "published"


def test_draft_command_persists_between_runs(tmp_path) -> None:
    draft = _run(tmp_path, "draft", "s1", "Next")
    timeline = _run(tmp_path, "episodes", "s1")

    assert [(entry.id, entry.is_draft) for entry in timeline] == [(draft.id, True)]


def test_feed_commands_serialize_to_json(tmp_path) -> None:
    mixed = _run(tmp_path, "mixed", "new")
    topic = _run(tmp_path, "topic", "topic4")

    payload = json.loads(json.dumps(_to_jsonable(mixed)))
    assert [entry["type"] for entry in payload] == ["episode"] * 3 + ["special"] * 2
    assert [show["id"] for show in topic["shows"]] == ["show7", "show8"]


def test_home_defaults_to_new_feed() -> None:
    args = build_parser().parse_args(["home"])

    assert args.feed_type == "new"
    assert args.mode == "discovery"
