"""Resolvers for values that could not be parsed from a file name."""
import dataclasses
from typing import Callable, Protocol

from .models import MEDIA_TV, ParsedFileInfo
from .parser import DEFAULT_SEASON, ensure_two_digits


class InputError(Exception):
    """Exception raised for invalid user input."""
    pass


class Resolver(Protocol):
    """Supplies season, episode or quality when the parser found none."""

    def ask_season(self, file_name: str) -> str: ...

    def ask_episode(self, file_name: str) -> str: ...

    def ask_quality(self, file_name: str) -> str: ...


def prompt(message: str) -> str:
    """Read one line from stdin, stripped."""
    return input(message).strip()


class ConsoleResolver:
    """Resolver asking on the console."""

    def __init__(self, ask: Callable[[str], str] = prompt):
        self.ask = ask

    def ask_season(self, file_name: str) -> str:
        return self.ask(f"No season found in '{file_name}', enter season [01]: ")

    def ask_episode(self, file_name: str) -> str:
        return self.ask(f"No episode found in '{file_name}', enter episode: ")

    def ask_quality(self, file_name: str) -> str:
        return self.ask(
            f"No video quality found in '{file_name}', enter it manually (e.g. 1080P): "
        )


def _number(value: str, what: str) -> str:
    value = value.strip()
    if not value.isdigit() or int(value) <= 0:
        raise InputError(f"Invalid {what}: '{value}'")
    return ensure_two_digits(value)


def resolve_missing(
    parsed: ParsedFileInfo,
    file_name: str,
    media_kind: str,
    resolver: Resolver
) -> ParsedFileInfo:
    """
    Fill in what the parser could not recognize.

    Season and episode are only asked for TV files; an empty season
    answer falls back to season 01.  Quality is asked for when missing
    and may be left empty.

    Raises:
        InputError: If a season or episode answer is not a positive number
    """
    changes = {}

    if media_kind == MEDIA_TV and parsed.episode is None:
        season = resolver.ask_season(file_name).strip()
        changes["season"] = _number(season, "season") if season else DEFAULT_SEASON
        changes["episode"] = _number(resolver.ask_episode(file_name), "episode")

    if not parsed.video_quality:
        quality = resolver.ask_quality(file_name).strip().upper()
        if quality:
            changes["video_quality"] = tuple(q for q in quality.split(".") if q)

    if not changes:
        return parsed
    return dataclasses.replace(parsed, **changes)
