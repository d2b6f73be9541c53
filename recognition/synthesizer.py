"""Synthesizer module for generating find/replace regex rename rules."""
import logging
import re
from pathlib import PurePath
from typing import Iterable

from .models import (
    MEDIA_MOVIE,
    MEDIA_TV,
    BatchRegexRule,
    MediaDescriptor,
    ParsedFileInfo,
    RegexRule,
)
from .parser import DEFAULT_SEASON, ensure_two_digits, parse_filename

log = logging.getLogger(__name__)


SEASON_GROUP = r'(\d{1,2})'
SEASON_EPISODE_GROUPS = r'S\1E\2'

# Season/episode token used to anchor the batch suffix
SEASON_EPISODE_TOKEN = re.compile(r'([Ss])(\d+)([Ee])(\d+)', re.ASCII)

# Tokens of a prefix: a run of digits or a single other character
PREFIX_TOKEN = re.compile(r'\d+|\D', re.ASCII)
DIGIT_RUN_PATTERN = r'\d+'


def episode_group(digits: str) -> str:
    """Capture group wide enough for the episode digits (two at least)."""
    return r'(\d{1,%d})' % max(2, len(digits))


def apply_season_offset(season: str, offset: int) -> str:
    """
    Shift a season number by *offset*.

    Args:
        season: Two-digit season string
        offset: Amount to add (may be negative)

    Returns:
        The shifted season, zero-padded to two digits

    Raises:
        ValueError: If the result is not a positive season number
    """
    value = int(season) + offset
    if value <= 0:
        raise ValueError(
            f"Season offset {offset:+d} turns season {season} into {value}"
        )
    return f"{value:02d}"


def join_name(*parts: str) -> str:
    """Join non-empty name parts with dots."""
    return ".".join(part for part in parts if part)


def format_tmdb_tag(tmdb_id: int, media_kind: str) -> str:
    """Format the ID tag appended to normalized names."""
    return f"{{tmdbid={tmdb_id};type={media_kind}}}"


def generalize_match(parsed: ParsedFileInfo, capture_season: bool) -> str:
    """
    Escape ``parsed.full_match`` with its numbers turned into groups.

    The episode digits always become a capture group; the season digits
    only when *capture_season* is set.  Replacements are applied in text
    order (season first), each on its own span, so equal season and
    episode numbers cannot collide.
    """
    text = parsed.full_match
    replacements = []
    if capture_season and parsed.season_span:
        replacements.append((parsed.season_span, SEASON_GROUP))
    if parsed.episode_span:
        start, end = parsed.episode_span
        replacements.append((parsed.episode_span, episode_group(text[start:end])))
    replacements.sort()

    pieces = []
    cursor = 0
    for (start, end), group in replacements:
        pieces.append(re.escape(text[cursor:start]))
        pieces.append(group)
        cursor = end
    pieces.append(re.escape(text[cursor:]))
    return "".join(pieces)


def _locate_match(original_name: str, parsed: ParsedFileInfo) -> int:
    start = parsed.match_start
    if start >= 0 and original_name[start:start + len(parsed.full_match)] == parsed.full_match:
        return start
    return original_name.find(parsed.full_match)


def format_normalized_name(
    descriptor: MediaDescriptor,
    parsed: ParsedFileInfo,
    media_kind: str,
    season_offset: int = 0
) -> str:
    """
    Format the normalized name of one file.

    Format: {title}.{year}[.S{season}E{episode}].{quality}.{tmdbid=..;type=..}
    """
    quality = parsed.quality.lower()
    if media_kind == MEDIA_MOVIE:
        return join_name(
            descriptor.title, descriptor.year, quality,
            format_tmdb_tag(descriptor.id, MEDIA_MOVIE)
        )

    season = apply_season_offset(parsed.season or DEFAULT_SEASON, season_offset)
    return join_name(
        descriptor.title, descriptor.year, f"S{season}E{parsed.episode}", quality,
        format_tmdb_tag(descriptor.id, MEDIA_TV)
    )


def synthesize(
    original_name: str,
    fixed_title: str | None,
    parsed: ParsedFileInfo,
    descriptor: MediaDescriptor,
    media_kind: str,
    season_offset: int = 0
) -> RegexRule:
    """
    Build the find/replace rule for a single file.

    Movies get the escaped filename and a fixed replacement.  TV files
    get the escaped filename with the episode number (and, when the
    season is neither the default nor offset, the season number) turned
    into capture groups.

    Args:
        original_name: The file name the rule must match
        fixed_title: Title part shared by the batch, or None
        parsed: Parsed (and resolved) file information
        descriptor: Title/year/id from TMDB
        media_kind: 'movie' or 'tv'
        season_offset: Offset added to the season; must already be valid

    Returns:
        RegexRule with the find pattern and replace template

    Raises:
        ValueError: For a TV rule without an episode number
    """
    find_pattern = re.escape(original_name)
    quality = parsed.quality.lower()

    if media_kind == MEDIA_MOVIE:
        return RegexRule(
            find_pattern=find_pattern,
            replace_template=join_name(
                descriptor.title, descriptor.year, quality,
                format_tmdb_tag(descriptor.id, MEDIA_MOVIE)
            ),
        )

    if parsed.episode is None:
        raise ValueError("Episode number must be resolved before building a TV rule")

    if fixed_title and fixed_title.lower() not in original_name.lower():
        log.warning("Fixed title %r does not occur in %r", fixed_title, original_name)

    season = parsed.season or DEFAULT_SEASON
    start = _locate_match(original_name, parsed) if parsed.full_match else -1

    if start >= 0 and parsed.episode_span:
        capture_season = (
            season_offset == 0
            and season != DEFAULT_SEASON
            and parsed.season_span is not None
        )
        end = start + len(parsed.full_match)
        find_pattern = (
            re.escape(original_name[:start])
            + generalize_match(parsed, capture_season)
            + re.escape(original_name[end:])
        )
        if capture_season:
            episode_code = SEASON_EPISODE_GROUPS
        else:
            episode_code = f"S{apply_season_offset(season, season_offset)}E\\1"
    else:
        log.debug("No matched span in %r, using literal episode code", original_name)
        episode_code = f"S{apply_season_offset(season, season_offset)}E{parsed.episode}"

    return RegexRule(
        find_pattern=find_pattern,
        replace_template=join_name(
            descriptor.title, descriptor.year, episode_code, quality,
            format_tmdb_tag(descriptor.id, MEDIA_TV)
        ),
    )


# ------------------------------------------------------------------
# Batch rules
# ------------------------------------------------------------------

def _tokenize_prefix(prefix: str) -> list[str | None]:
    """Split a prefix into characters, collapsing digit runs to None."""
    return [
        None if token.isascii() and token.isdigit() else token
        for token in PREFIX_TOKEN.findall(prefix)
    ]


def _shared_tokens(a: list[str | None], b: list[str | None]) -> list[str | None]:
    shared = []
    for token_a, token_b in zip(a, b):
        if token_a != token_b:
            break
        shared.append(token_a)
    return shared


def render_prefix_pattern(tokens: list[str | None]) -> str:
    """Escape prefix tokens, turning digit placeholders into \\d+."""
    return "".join(
        DIGIT_RUN_PATTERN if token is None else re.escape(token)
        for token in tokens
    )


def find_common_prefix_pattern(prefixes: list[str]) -> str:
    """
    Build a pattern for the prefix shared by all *prefixes*.

    Digit runs are compared as a single placeholder, so prefixes that
    only differ in their numbers still share them.

    Args:
        prefixes: Text found before the fixed title in each file

    Returns:
        Escaped regex for the common leading part
    """
    if not prefixes:
        return ""
    common = _tokenize_prefix(prefixes[0])
    for prefix in prefixes[1:]:
        common = _shared_tokens(common, _tokenize_prefix(prefix))
    return render_prefix_pattern(common)


def _find_title(name: str, fixed_title: str) -> re.Match | None:
    return re.search(re.escape(fixed_title), name, re.IGNORECASE)


def _quality_end(suffix: str, parsed: ParsedFileInfo) -> int:
    """End offset of the quality tag in *suffix*, or -1."""
    match = re.search(r'\b%s\b' % re.escape(parsed.quality), suffix, re.IGNORECASE | re.ASCII)
    if match:
        return match.end()
    # Tags not adjacent to each other: cut after the last one
    last_tag = parsed.video_quality[-1]
    matches = list(re.finditer(r'\b%s\b' % re.escape(last_tag), suffix, re.IGNORECASE | re.ASCII))
    if matches:
        return matches[-1].end()
    return -1


def synthesize_batch(
    files: Iterable[str],
    fixed_title: str,
    descriptor: MediaDescriptor,
    season_offset: int = 0
) -> BatchRegexRule | None:
    """
    Build one rule matching every episode file of a directory.

    Filenames are sorted and the first one is used as the reference for
    the suffix (season/episode token up to the quality tag).  The prefix
    before the fixed title is reduced to what all files share.

    Args:
        files: File names or paths containing *fixed_title*
        fixed_title: Title part shared by all files (case-insensitive)
        descriptor: Title/year/id from TMDB
        season_offset: Offset added to the season; must already be valid

    Returns:
        BatchRegexRule, or None if the reference file has no title or
        no season/episode token after it
    """
    names = sorted(PurePath(f).name for f in files)
    if not names or not fixed_title:
        return None

    reference = names[0]
    title_match = _find_title(reference, fixed_title)
    if not title_match:
        log.debug("Fixed title %r not found in %r", fixed_title, reference)
        return None

    suffix = reference[title_match.end():]
    token = SEASON_EPISODE_TOKEN.search(suffix)
    if not token:
        log.debug("No season/episode token after title in %r", reference)
        return None
    suffix = suffix[token.start():]

    parsed = parse_filename(reference)
    wildcard = ""
    if parsed.video_quality:
        end = _quality_end(suffix, parsed)
        if end >= 0:
            suffix = suffix[:end]
            wildcard = ".*"

    # With an offset the season cannot be rewritten by a back-reference,
    # so the rule is pinned to the reference file's season.
    token = SEASON_EPISODE_TOKEN.match(suffix)
    season_marker, season_digits, episode_marker, episode_digits = token.groups()
    if season_offset:
        season = apply_season_offset(ensure_two_digits(season_digits), season_offset)
        season_pattern = season_digits
        episode_code = f"S{season}E\\1"
    else:
        season_pattern = SEASON_GROUP
        episode_code = SEASON_EPISODE_GROUPS
    suffix_pattern = (
        f"{season_marker}{season_pattern}{episode_marker}{episode_group(episode_digits)}"
        + re.escape(suffix[token.end():])
        + wildcard
    )

    reference_prefix = reference[:title_match.start()]
    prefixes = [reference_prefix]
    for name in names[1:]:
        match = _find_title(name, fixed_title)
        if match is None:
            log.debug("Skipping %r: fixed title not found", name)
            continue
        prefixes.append(name[:match.start()])

    prefix_pattern = find_common_prefix_pattern(prefixes)
    bridge = ""
    if prefix_pattern != render_prefix_pattern(_tokenize_prefix(reference_prefix)):
        bridge = ".*?"

    find_pattern = (
        prefix_pattern + bridge + re.escape(title_match.group(0)) + ".*?" + suffix_pattern
    )
    replace_template = join_name(
        descriptor.title, descriptor.year, episode_code,
        parsed.quality.lower(), format_tmdb_tag(descriptor.id, MEDIA_TV)
    )
    log.debug("Batch rule from %d file(s): %s", len(prefixes), find_pattern)
    return BatchRegexRule(find_pattern=find_pattern, replace_template=replace_template)
