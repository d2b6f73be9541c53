"""Parser module for extracting season, episode and quality from file names."""
import logging
import re
from pathlib import PurePath

from .models import ParsedFileInfo

log = logging.getLogger(__name__)


DEFAULT_SEASON = "01"

# Resolution / dynamic-range tags, plus codec tags that are recognized
# so they do not leak into other matches but never reported.
QUALITY_PATTERN = re.compile(
    r'\b(1080p|720p|2160p|4k|8k|480p|HDR|HEVC|H265)\b',
    re.IGNORECASE | re.ASCII
)
EXCLUDED_QUALITY_TAGS = {"HEVC", "H265"}

# Season + episode patterns (order matters - more specific first)
SEASON_EPISODE_PATTERNS = [
    # S01E04 / s1e4
    re.compile(r'[Ss](\d{1,2})[Ee](\d{1,2})', re.ASCII),
    # 第2季第5集 / 第2季 第5集
    re.compile(r'第(\d{1,2})季.?第(\d{1,2})集', re.ASCII),
    # Season 1 Episode 4 / season.1.episode.4
    re.compile(r'Season\s*(\d{1,2}).*?Episode\s*(\d{1,2})', re.IGNORECASE | re.ASCII),
]

# Episode-only patterns, tried when no season was found
EPISODE_ONLY_PATTERNS = [
    # E05. (must not run into another digit)
    re.compile(r'[Ee](\d{1,3})[^0-9]', re.ASCII),
    # 第5集
    re.compile(r'第(\d{1,3})集', re.ASCII),
    # Ep.05 / Ep05
    re.compile(r'[Ee]p\.?(\d{1,3})', re.ASCII),
    # Episode.05 / Episode05
    re.compile(r'[Ee]pisode\.?(\d{1,3})', re.ASCII),
    # EP05
    re.compile(r'EP(\d{1,3})', re.ASCII),
]


def ensure_two_digits(number: str) -> str:
    """Zero-pad a single digit; longer numbers are returned untouched."""
    if len(number) == 1:
        return "0" + number
    return number


def scan_quality(file_name: str) -> tuple[str, ...]:
    """
    Collect quality tags in order of appearance.

    Tags are uppercased and codec tags are dropped.  Repeated tags are
    kept as found.
    """
    tags = []
    for match in QUALITY_PATTERN.finditer(file_name):
        tag = match.group(1).upper()
        if tag in EXCLUDED_QUALITY_TAGS:
            continue
        tags.append(tag)
    return tuple(tags)


def _relative_span(match: re.Match, group: int) -> tuple[int, int]:
    start, end = match.span(group)
    return start - match.start(), end - match.start()


def match_season_episode(file_name: str) -> re.Match | None:
    """Return the first season+episode match, trying rules in order."""
    for pattern in SEASON_EPISODE_PATTERNS:
        match = pattern.search(file_name)
        if match:
            log.debug("Season/episode rule %r matched %r", pattern.pattern, match.group(0))
            return match
    return None


def match_episode_only(file_name: str) -> re.Match | None:
    """Return the first episode-only match, trying rules in order."""
    for pattern in EPISODE_ONLY_PATTERNS:
        match = pattern.search(file_name)
        if match:
            log.debug("Episode rule %r matched %r", pattern.pattern, match.group(0))
            return match
    return None


def parse_filename(file_name: str) -> ParsedFileInfo:
    """
    Parse a media filename for season, episode and quality.

    Never raises; fields that could not be recognized are left empty.

    Args:
        file_name: File name (a leading directory part is ignored)

    Returns:
        ParsedFileInfo with the recognized values
    """
    name = PurePath(file_name).name
    quality = scan_quality(name)

    match = match_season_episode(name)
    if match:
        return ParsedFileInfo(
            full_match=match.group(0),
            season=ensure_two_digits(match.group(1)),
            episode=ensure_two_digits(match.group(2)),
            video_quality=quality,
            match_start=match.start(),
            season_span=_relative_span(match, 1),
            episode_span=_relative_span(match, 2),
        )

    match = match_episode_only(name)
    if match:
        return ParsedFileInfo(
            full_match=match.group(0),
            season=DEFAULT_SEASON,
            episode=ensure_two_digits(match.group(1)),
            video_quality=quality,
            match_start=match.start(),
            episode_span=_relative_span(match, 1),
        )

    log.debug("No season/episode token in %r", name)
    return ParsedFileInfo(video_quality=quality)
