"""Small persisted id-list stores: hidden content and followed shows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError

from episodic_feed.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

_ID_LISTS = TypeAdapter(dict[str, list[str]])


@dataclass
class _PersistedIdLists:
    """Named lists of ids kept newest-first and without duplicates."""

    kv: KeyValueStore
    storage_key: str = ""
    lists: dict[str, list[str]] = field(default_factory=dict)

    async def hydrate(self) -> None:
        raw = await self.kv.get(self.storage_key)
        if raw is None:
            return
        try:
            data = _ID_LISTS.validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable {self.storage_key} snapshot: {exc}")
            return
        for name in self.lists:
            self.lists[name] = data.get(name, [])

    async def save(self) -> None:
        await self.kv.set(self.storage_key, _ID_LISTS.dump_json(self.lists))

    def _add(self, name: str, value: str) -> None:
        ids = self.lists[name]
        if value not in ids:
            ids.insert(0, value)

    def _remove(self, name: str, value: str) -> None:
        self.lists[name] = [existing for existing in self.lists[name] if existing != value]


@dataclass
class VisibilityStore(_PersistedIdLists):
    """Shows and episodes the user chose to hide from public feeds."""

    storage_key: str = "visibility-store"
    lists: dict[str, list[str]] = field(
        default_factory=lambda: {"hidden_show_ids": [], "hidden_episode_ids": []}
    )

    @property
    def hidden_show_ids(self) -> list[str]:
        return self.lists["hidden_show_ids"]

    @property
    def hidden_episode_ids(self) -> list[str]:
        return self.lists["hidden_episode_ids"]

    def hide_show(self, show_id: str) -> None:
        self._add("hidden_show_ids", show_id)

    def unhide_show(self, show_id: str) -> None:
        self._remove("hidden_show_ids", show_id)

    def hide_episode(self, episode_id: str) -> None:
        self._add("hidden_episode_ids", episode_id)

    def unhide_episode(self, episode_id: str) -> None:
        self._remove("hidden_episode_ids", episode_id)

    def is_show_hidden(self, show_id: str) -> bool:
        return show_id in self.lists["hidden_show_ids"]

    def is_episode_hidden(self, episode_id: str) -> bool:
        return episode_id in self.lists["hidden_episode_ids"]


@dataclass
class FollowStore(_PersistedIdLists):
    """Shows the user follows."""

    storage_key: str = "follow-store"
    lists: dict[str, list[str]] = field(default_factory=lambda: {"followed_show_ids": []})

    @property
    def followed_show_ids(self) -> list[str]:
        return self.lists["followed_show_ids"]

    def follow_show(self, show_id: str) -> None:
        self._add("followed_show_ids", show_id)

    def unfollow_show(self, show_id: str) -> None:
        self._remove("followed_show_ids", show_id)

    def toggle_follow_show(self, show_id: str) -> bool:
        """Flip the follow state; returns True when the show is now followed."""
        if self.is_show_followed(show_id):
            self.unfollow_show(show_id)
            return False
        self.follow_show(show_id)
        return True

    def is_show_followed(self, show_id: str) -> bool:
        return show_id in self.lists["followed_show_ids"]
