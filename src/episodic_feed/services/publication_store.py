"""Registry of creator shows, drafts and locally published episodes.

State lives in memory and is mutated synchronously; ``hydrate`` and ``save``
move it to and from the persisted key-value store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from pydantic import BaseModel, Field, ValidationError

from episodic_feed.models.schemas import (
    CreatorShow,
    DraftEpisode,
    EpisodeWithShow,
    PublishedEpisode,
    Show,
)
from episodic_feed.services.kv_store import KeyValueStore
from episodic_feed.tools.ids import Clock, to_iso, utc_now

logger = logging.getLogger(__name__)

STORE_KEY = "creator-store"

# Fields a draft patch may never overwrite
_FROZEN_DRAFT_FIELDS = {"id", "show_id", "created_at_iso"}


class CreatorState(BaseModel):
    """Serializable snapshot of the publication store."""

    shows: list[CreatorShow] = Field(default_factory=list)
    draft_episodes_by_show_id: dict[str, list[DraftEpisode]] = Field(default_factory=dict)
    published_episodes: list[PublishedEpisode] = Field(default_factory=list)
    published_shows: dict[str, Show] = Field(default_factory=dict)
    local_published_episodes_by_show_id: dict[str, list[EpisodeWithShow]] = Field(default_factory=dict)


@dataclass
class PublicationStore:
    """Owns shows and episodes created on this device."""

    kv: KeyValueStore
    clock: Clock = utc_now
    state: CreatorState = field(default_factory=CreatorState)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def hydrate(self) -> None:
        raw = await self.kv.get(STORE_KEY)
        if raw is None:
            return
        try:
            self.state = CreatorState.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable {STORE_KEY} snapshot: {exc}")
            self.state = CreatorState()

    async def save(self) -> None:
        await self.kv.set(STORE_KEY, self.state.model_dump_json().encode("utf-8"))

    def reset(self) -> None:
        self.state = CreatorState()

    def _now_iso(self) -> str:
        return to_iso(self.clock())

    # ------------------------------------------------------------------
    # Shows
    # ------------------------------------------------------------------

    @property
    def shows(self) -> list[CreatorShow]:
        return self.state.shows

    def add_show(
        self,
        show_id: str,
        title: str,
        topic_id: str | None = None,
        topic_name: str | None = None,
    ) -> CreatorShow:
        """Append a show. Callers generate unique ids; duplicates are not checked."""
        show = CreatorShow(
            id=show_id,
            title=title,
            topic_ids=[topic_id] if topic_id else [],
            topic_name=topic_name,
            created_at_iso=self._now_iso(),
        )
        self.state.shows.append(show)
        return show

    def get_show_by_id(self, show_id: str) -> CreatorShow | None:
        return next((show for show in self.state.shows if show.id == show_id), None)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def add_draft_episode(self, draft: DraftEpisode) -> DraftEpisode:
        """Insert or replace (by id) a draft in its show's list, stamping both timestamps."""
        now = self._now_iso()
        stamped = draft.model_copy(update={"created_at_iso": now, "updated_at_iso": now})
        drafts = self.state.draft_episodes_by_show_id.setdefault(draft.show_id, [])
        for index, existing in enumerate(drafts):
            if existing.id == draft.id:
                drafts[index] = stamped
                break
        else:
            drafts.append(stamped)
        return stamped

    def update_draft_episode(self, draft_id: str, patch: dict[str, Any]) -> DraftEpisode | None:
        """Merge ``patch`` into the draft with ``draft_id``; no-op when it does not exist."""
        located = self._locate_draft(draft_id)
        if located is None:
            logger.debug(f"update_draft_episode: no draft {draft_id}")
            return None
        drafts, index = located
        allowed = {key: value for key, value in patch.items() if key not in _FROZEN_DRAFT_FIELDS}
        merged = {**drafts[index].model_dump(), **allowed, "updated_at_iso": self._now_iso()}
        drafts[index] = DraftEpisode.model_validate(merged)
        return drafts[index]

    def remove_draft_episode(self, draft_id: str) -> None:
        for show_id, drafts in self.state.draft_episodes_by_show_id.items():
            self.state.draft_episodes_by_show_id[show_id] = [d for d in drafts if d.id != draft_id]

    def get_draft_episode_by_id(self, draft_id: str) -> DraftEpisode | None:
        located = self._locate_draft(draft_id)
        if located is None:
            return None
        drafts, index = located
        return drafts[index]

    def get_draft_episodes_by_show_id(self, show_id: str) -> list[DraftEpisode]:
        return list(self.state.draft_episodes_by_show_id.get(show_id, []))

    def share_draft(self, show_id: str, draft_id: str) -> None:
        """Share with the writers room; ``shared_at`` is stamped only the first time."""
        now = self._now_iso()
        self._map_show_drafts(
            show_id,
            draft_id,
            lambda d: {"shared_with_writers_room": True, "shared_at": d.shared_at or now},
        )

    def unshare_draft(self, show_id: str, draft_id: str) -> None:
        self._map_show_drafts(show_id, draft_id, lambda d: {"shared_with_writers_room": False})

    def get_shared_drafts_by_show_id(self, show_id: str) -> list[DraftEpisode]:
        """Shared drafts, most recently shared first."""
        shared = [d for d in self.state.draft_episodes_by_show_id.get(show_id, []) if d.shared_with_writers_room]
        return sorted(shared, key=lambda d: d.shared_at or d.created_at_iso, reverse=True)

    def _locate_draft(self, draft_id: str) -> tuple[list[DraftEpisode], int] | None:
        for drafts in self.state.draft_episodes_by_show_id.values():
            for index, draft in enumerate(drafts):
                if draft.id == draft_id:
                    return drafts, index
        return None

    def _map_show_drafts(
        self,
        show_id: str,
        draft_id: str,
        update: Callable[[DraftEpisode], dict[str, Any]],
    ) -> None:
        drafts = self.state.draft_episodes_by_show_id.get(show_id)
        if drafts is None:
            return
        self.state.draft_episodes_by_show_id[show_id] = [
            d.model_copy(update=update(d)) if d.id == draft_id else d for d in drafts
        ]

    # ------------------------------------------------------------------
    # Published episodes
    # ------------------------------------------------------------------

    @property
    def published_episodes(self) -> list[PublishedEpisode]:
        return self.state.published_episodes

    @property
    def published_shows(self) -> dict[str, Show]:
        return self.state.published_shows

    def add_published_episode(self, episode: PublishedEpisode, show: Show) -> None:
        self.state.published_episodes.append(episode)
        self.state.published_shows[show.id] = show

    def add_local_published_episode(self, show_id: str, item: EpisodeWithShow) -> None:
        self.state.local_published_episodes_by_show_id.setdefault(show_id, []).append(item)

    def get_published_episode_by_id(self, episode_id: str) -> PublishedEpisode | None:
        return next((ep for ep in self.state.published_episodes if ep.id == episode_id), None)

    def get_local_published_by_show_id(self, show_id: str) -> list[EpisodeWithShow]:
        return list(self.state.local_published_episodes_by_show_id.get(show_id, []))

    def iter_local_published(self) -> Iterator[EpisodeWithShow]:
        for items in self.state.local_published_episodes_by_show_id.values():
            yield from items

    def published_items_for_show(self, show_id: str) -> list[EpisodeWithShow]:
        """Published episodes for ``show_id`` paired with their published show record."""
        show = self.state.published_shows.get(show_id)
        if show is None:
            return []
        return [
            EpisodeWithShow(episode=episode, show=show)
            for episode in self.state.published_episodes
            if episode.show_id == show_id
        ]
