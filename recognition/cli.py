#!/usr/bin/env python3
"""
custom-recognition - regex rename rule generator

Builds find/replace regular expressions that normalize media file names
using TMDB metadata.
"""
import argparse
import logging
import sys
from pathlib import Path

from .config import CredentialStore
from .models import MEDIA_MOVIE, MEDIA_TV, BatchRegexRule, RegexRule
from .parser import parse_filename
from .resolver import ConsoleResolver, InputError, Resolver, prompt, resolve_missing
from .scanner import find_matching_files
from .synthesizer import (
    apply_season_offset,
    format_normalized_name,
    synthesize,
    synthesize_batch,
)
from .tmdb import DEFAULT_LANGUAGE, TMDBClient, TMDBError, parse_tmdb_id

log = logging.getLogger(__name__)

MEDIA_CHOICES = {"1": MEDIA_MOVIE, "2": MEDIA_TV, MEDIA_MOVIE: MEDIA_MOVIE, MEDIA_TV: MEDIA_TV}

USAGE_NOTES = [
    "1. The pattern above matches every episode file of this title in the directory",
    "2. \\1 is the season number, \\2 is the episode number",
    "3. The quality tag is taken from the first file",
]
USAGE_NOTE_OFFSET = "2. \\1 is the episode number; the season is fixed by the season offset"


def setup_logging(verbose: bool) -> None:
    """Configure root logging for the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="  [%(levelname)s] %(name)s: %(message)s",
    )


def ask_directory(value: str | None) -> Path:
    if value is None:
        value = prompt("Enter the video directory (press Enter for the current directory): ")
    return Path(value or ".")


def ask_fixed_title(value: str | None) -> str:
    if value is None:
        value = prompt("Enter the fixed part of the title to match: ")
    if not value:
        raise InputError("Title cannot be empty")
    return value


def ask_media_kind(value: str | None) -> str:
    if value is None:
        print("\nSelect the media type to look up:")
        print("1. Movie")
        print("2. TV show")
        value = prompt("Enter option (1 or 2): ")
    kind = MEDIA_CHOICES.get(value.lower())
    if kind is None:
        raise InputError(f"Invalid option: '{value}'")
    return kind


def ask_tmdb_id(value: str | None, media_kind: str) -> int:
    if value is None:
        value = prompt("Enter TMDB ID: ")
    tmdb_id, id_kind = parse_tmdb_id(value)
    if tmdb_id is None or tmdb_id <= 0:
        raise InputError(f"Invalid TMDB ID: '{value}'")
    if id_kind and id_kind != media_kind:
        log.warning("TMDB ID refers to a %s, looking it up as %s", id_kind, media_kind)
    return tmdb_id


def ask_season_offset(value: str | None) -> int:
    if value is None:
        value = prompt("Enter season offset (press Enter for 0): ")
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        raise InputError(f"Invalid season offset: '{value}'") from None


def ask_api_key(store: CredentialStore) -> str:
    """Load the API key, asking for it and storing it on first use."""
    api_key = store.load_api_key()
    if api_key:
        return api_key

    api_key = prompt("Enter TMDB API key: ")
    if not api_key:
        raise InputError("API key cannot be empty")
    try:
        store.save_api_key(api_key)
    except OSError as e:
        print(f"Warning: could not save config file: {e}")
    return api_key


def print_rule(original_name: str, normalized_name: str, rule: RegexRule) -> None:
    """Print the single-file rule."""
    print("\n=== Regex rename rule ===")
    print("Original filename:")
    print(f"  {original_name}")
    print("Normalized name:")
    print(f"  {normalized_name}")
    print()
    print("Find pattern:")
    print(rule.find_pattern)
    print("Replace template:")
    print(rule.replace_template)


def print_batch_rule(rule: BatchRegexRule) -> None:
    """Print the batch rule and its usage notes."""
    print("\n=== Batch regex rename rule ===")
    print("Batch find pattern:")
    print(rule.find_pattern)
    print()
    print("Batch replace template:")
    print(rule.replace_template)
    notes = list(USAGE_NOTES)
    if "\\2" not in rule.replace_template:
        notes[1] = USAGE_NOTE_OFFSET
    print("\nUsage:")
    for line in notes:
        print(line)


def run(
    args: argparse.Namespace,
    resolver: Resolver,
    store: CredentialStore
) -> int:
    """Run the pipeline for parsed command-line arguments."""
    directory = ask_directory(args.dir)
    fixed_title = ask_fixed_title(args.title)

    try:
        files = find_matching_files(directory, fixed_title)
    except OSError as e:
        print(f"Error: failed to search files: {e}")
        return 1

    if not files:
        print("No matching files found, exiting.")
        return 1
    log.debug("Found %d matching file(s), reference: %s", len(files), files[0])

    media_kind = ask_media_kind(args.type)
    tmdb_id = ask_tmdb_id(args.id, media_kind)
    season_offset = ask_season_offset(args.season_offset) if media_kind == MEDIA_TV else 0
    api_key = ask_api_key(store)

    reference = files[0].name
    parsed = resolve_missing(parse_filename(reference), reference, media_kind, resolver)
    log.debug("Parsed %r: %s", reference, parsed)

    if media_kind == MEDIA_TV:
        try:
            apply_season_offset(parsed.season, season_offset)
        except ValueError as e:
            raise InputError(str(e)) from None

    try:
        client = TMDBClient(api_key, language=args.language)
        descriptor = client.get_details(media_kind, tmdb_id)
    except TMDBError as e:
        print(f"Error: {e}")
        return 1

    rule = synthesize(reference, fixed_title, parsed, descriptor, media_kind, season_offset)
    normalized_name = format_normalized_name(descriptor, parsed, media_kind, season_offset)
    batch_rule = None
    if media_kind == MEDIA_TV:
        batch_rule = synthesize_batch(
            [f.name for f in files], fixed_title, descriptor, season_offset
        )

    print_rule(reference, normalized_name, rule)
    if batch_rule:
        print_batch_rule(batch_rule)
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="custom-recognition",
        description="Generate regex rename rules for media files using TMDB metadata."
    )

    parser.add_argument(
        "--dir",
        type=str,
        default=None,
        help="Directory containing the video files (prompted if omitted)"
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Fixed part of the title shared by the files"
    )
    parser.add_argument(
        "--type",
        choices=[MEDIA_MOVIE, MEDIA_TV],
        default=None,
        help="Media type to look up"
    )
    parser.add_argument(
        "--id",
        type=str,
        default=None,
        help="TMDB ID, tv:ID / movie:ID or a themoviedb.org URL"
    )
    parser.add_argument(
        "--season-offset",
        type=str,
        default=None,
        metavar="N",
        help="Number added to the parsed season (TV only)"
    )
    parser.add_argument(
        "--language",
        type=str,
        default=DEFAULT_LANGUAGE,
        help=f"Language for TMDB results (default: {DEFAULT_LANGUAGE})"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path of the API key config file"
    )
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Exit without waiting for Enter"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed debug information"
    )

    parsed_args = parser.parse_args(args)
    setup_logging(parsed_args.verbose)

    try:
        code = run(parsed_args, ConsoleResolver(), CredentialStore(parsed_args.config))
    except InputError as e:
        print(f"Error: {e}, exiting.")
        return 1

    if code == 0 and not parsed_args.no_wait:
        input("\nPress Enter to exit...")
    return code


if __name__ == "__main__":
    sys.exit(main())
