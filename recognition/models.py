"""Data models for the recognition package."""
from dataclasses import dataclass, field
from typing import Literal


MEDIA_MOVIE = "movie"
MEDIA_TV = "tv"

MediaKind = Literal["movie", "tv"]


@dataclass(frozen=True)
class ParsedFileInfo:
    """Season, episode and quality information recognized in a filename.

    ``season_span`` and ``episode_span`` are offsets into ``full_match``
    of the literal digits that produced the value.  They are ``None``
    when the value was defaulted or supplied by hand.
    """
    full_match: str = ""
    season: str | None = None
    episode: str | None = None
    video_quality: tuple[str, ...] = field(default_factory=tuple)
    match_start: int = -1
    season_span: tuple[int, int] | None = None
    episode_span: tuple[int, int] | None = None

    @property
    def quality(self) -> str:
        """Quality tags joined with dots (e.g. '2160P.HDR')."""
        return ".".join(self.video_quality)


@dataclass(frozen=True)
class MediaDescriptor:
    """Title, year and ID returned by TMDB."""
    title: str
    year: str
    id: int


@dataclass(frozen=True)
class RegexRule:
    """Find pattern and replace template for a single file."""
    find_pattern: str
    replace_template: str


@dataclass(frozen=True)
class BatchRegexRule:
    """Find pattern and replace template covering a directory of episodes."""
    find_pattern: str
    replace_template: str
