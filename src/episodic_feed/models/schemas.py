"""Data models for feed resolution."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class FeedType(str, Enum):
    """Pre-defined slices of the catalog."""

    NEW = "new"
    CONTINUE = "continue"
    LIBRARY = "library"
    NEW_SHOWS_ONLY = "newShowsOnly"
    LOCAL = "local"


class EpisodeKind(str, Enum):
    """Whether an episode is a regular episode or a trailer."""

    EPISODE = "episode"
    TRAILER = "trailer"


class PublishStatus(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"


class SpecialKind(str, Enum):
    """Kinds of non-episode feed entries."""

    RECAP = "recap"
    TRAILER = "trailer"
    BTS = "bts"
    QNA = "qna"


class ShowSource(str, Enum):
    """Where a resolved show came from."""

    MERGED = "merged"
    CREATOR = "creator"
    CURATED = "curated"


class FeedMode(str, Enum):
    """Home feed mode."""

    DISCOVERY = "discovery"
    FOLLOWING = "following"


class Topic(BaseModel):
    id: str
    name: str


class Show(BaseModel):
    """A show as seen by feeds (catalog or published)."""

    id: str
    title: Optional[str] = None
    creator_id: str = ""
    topic_ids: list[str] = Field(default_factory=list)
    topic_name: Optional[str] = None
    created_at_iso: Optional[str] = None


class Episode(BaseModel):
    """A playable episode.

    Numbering and title may be missing on raw records; feeds always hand out
    normalized copies (see ``tools.normalization``).
    """

    id: str
    show_id: str
    episode_number: Optional[int] = None
    season_number: Optional[int] = None
    title: Optional[str] = None
    video_url: str = ""
    duration: int = 0
    created_at: datetime
    published_at: Optional[datetime] = None
    trailer_for_episode_number: Optional[int] = None
    topic_ids: Optional[list[str]] = None
    # Set on locally published episodes; catalog records leave them empty
    kind: Optional[EpisodeKind] = None
    episode_type: Optional[EpisodeKind] = None
    status: Optional[PublishStatus] = None


class PublishedEpisode(Episode):
    """An episode created on-device by publishing a draft."""

    kind: EpisodeKind = EpisodeKind.EPISODE
    status: PublishStatus = PublishStatus.PUBLISHED


class EpisodeWithShow(BaseModel):
    """The fundamental feed record."""

    type: Literal["episode"] = "episode"
    episode: Episode
    show: Show


class Special(BaseModel):
    """A non-episode feed entry (behind the scenes, Q&A, ...)."""

    type: Literal["special"] = "special"
    special_id: Optional[str] = None
    title: str
    kind: SpecialKind
    attached_show_ids: Optional[list[str]] = None
    attached_topic_ids: Optional[list[str]] = None

    @model_validator(mode="after")
    def _require_attachment(self) -> "Special":
        if not self.attached_show_ids and not self.attached_topic_ids:
            raise ValueError("special must be attached to at least one show or topic")
        return self


FeedItem = Annotated[Union[EpisodeWithShow, Special], Field(discriminator="type")]


class CreatorShow(BaseModel):
    """A show created locally by the creator flow."""

    id: str
    title: str
    topic_ids: list[str] = Field(default_factory=list)
    topic_name: Optional[str] = None
    created_at_iso: str


class DraftEpisode(BaseModel):
    """An unpublished, editable episode owned by the creator flow."""

    id: str
    show_id: str
    title: str
    season_number: int = 1
    episode_number: int = 1
    hook_template_id: Optional[str] = None
    next_drop_iso: Optional[str] = None
    previously_on_episode_ids: list[str] = Field(default_factory=list)
    episode_type: EpisodeKind = EpisodeKind.EPISODE
    scenes: list[dict[str, Any]] = Field(default_factory=list)
    shared_with_writers_room: bool = False
    shared_at: Optional[str] = None
    created_at_iso: str = ""
    updated_at_iso: str = ""


class PublishEpisodeInput(BaseModel):
    """Request to publish an episode or trailer."""

    show_id: str
    title: str
    season_number: Optional[int] = None
    episode_number: Optional[int] = None
    episode_type: EpisodeKind = EpisodeKind.EPISODE
    duration: Optional[int] = None
    video_url: Optional[str] = None
    trailer_for_episode_number: Optional[int] = None
    show_title: Optional[str] = None
    draft_id: Optional[str] = None


class ResolveDebug(BaseModel):
    """Provenance of a resolved show, for diagnostics."""

    show_id: str
    has_creator: bool
    has_curated: bool
    curated_from: Optional[Literal["catalog", "published"]] = None
    title_from: Optional[ShowSource] = None
    topics_from: Optional[ShowSource] = None


class ResolvedShow(BaseModel):
    show: Show
    source: ShowSource
    debug: ResolveDebug


class TimelineEntry(BaseModel):
    """A row on the show page: published episodes overlaid with drafts."""

    id: str
    title: str
    season_number: int
    episode_number: int
    is_draft: bool
    is_trailer: bool
    trailer_for_episode_number: Optional[int] = None
