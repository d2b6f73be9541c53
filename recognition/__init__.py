"""
custom-recognition - regex rename rule generator

A CLI tool that builds find/replace regular expressions for media files
using TMDB metadata.
"""
from .models import (
    MEDIA_MOVIE,
    MEDIA_TV,
    ParsedFileInfo,
    MediaDescriptor,
    RegexRule,
    BatchRegexRule,
)
from .parser import parse_filename, scan_quality
from .synthesizer import (
    apply_season_offset,
    format_normalized_name,
    synthesize,
    synthesize_batch,
)
from .tmdb import TMDBClient, TMDBError, get_year, parse_tmdb_id
from .config import CredentialStore
from .resolver import ConsoleResolver, InputError, resolve_missing
from .scanner import find_matching_files

__version__ = "0.1.0"
__all__ = [
    "MEDIA_MOVIE",
    "MEDIA_TV",
    "ParsedFileInfo",
    "MediaDescriptor",
    "RegexRule",
    "BatchRegexRule",
    "parse_filename",
    "scan_quality",
    "apply_season_offset",
    "format_normalized_name",
    "synthesize",
    "synthesize_batch",
    "TMDBClient",
    "TMDBError",
    "get_year",
    "parse_tmdb_id",
    "CredentialStore",
    "ConsoleResolver",
    "InputError",
    "resolve_missing",
    "find_matching_files",
]
