"""TMDB API client module."""
import logging
import re
import time
from datetime import datetime

import requests

from .models import MEDIA_MOVIE, MEDIA_TV, MediaDescriptor

log = logging.getLogger(__name__)


TMDB_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_TIMEOUT = 10
DEFAULT_LANGUAGE = "zh-CN"
RETRY_DELAY = 1.0


class TMDBError(Exception):
    """Exception raised for TMDB API errors."""
    pass


def get_year(date_str: str | None) -> str:
    """
    Extract the year from a 'YYYY-MM-DD' date.

    Returns an empty string for missing or malformed dates.
    """
    if not date_str:
        return ""
    try:
        return str(datetime.strptime(date_str, "%Y-%m-%d").year)
    except ValueError:
        return ""


def parse_tmdb_id(text: str) -> tuple[int | None, str | None]:
    """
    Parse a TMDB ID as typed by the user.

    Supports:
    - 12345
    - tv:12345 / movie:12345
    - https://www.themoviedb.org/tv/12345-some-show
    - https://www.themoviedb.org/movie/12345

    Returns:
        Tuple of (tmdb_id, media_kind); media_kind is None for a bare
        number, and (None, None) is returned for invalid input
    """
    text = text.strip()

    url_match = re.search(r'themoviedb\.org/(tv|movie)/(\d+)', text)
    if url_match:
        return int(url_match.group(2)), url_match.group(1)

    short_match = re.fullmatch(r'(tv|movie):(\d+)', text, re.IGNORECASE)
    if short_match:
        return int(short_match.group(2)), short_match.group(1).lower()

    if text.isdigit():
        return int(text), None

    return None, None


class TMDBClient:
    """Client for TMDB detail lookups."""

    def __init__(
        self,
        api_key: str,
        language: str | None = None,
        base_url: str = TMDB_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = 1
    ):
        """
        Initialize TMDB client.

        Args:
            api_key: TMDB API key
            language: TMDB API language tag. Falls back to DEFAULT_LANGUAGE.
            base_url: API root, without trailing slash
            timeout: Per-request timeout in seconds
            retries: Extra attempts after a connection error or 5xx status

        Raises:
            TMDBError: If the API key is empty
        """
        if not api_key:
            raise TMDBError("TMDB API key is empty")
        self.api_key = api_key
        self.language = language or DEFAULT_LANGUAGE
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = retries

    def _request(self, endpoint: str) -> dict:
        """
        GET an endpoint and decode its JSON body.

        Raises:
            TMDBError: On connection failure, non-200 status or invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        params = {"api_key": self.api_key, "language": self.language}
        headers = {"accept": "application/json"}

        log.debug("GET %s language=%s", endpoint, self.language)

        attempts = self.retries + 1
        for attempt in range(attempts):
            try:
                response = requests.get(
                    url, params=params, headers=headers, timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                log.debug("Request error: %s (attempt %d/%d)", e, attempt + 1, attempts)
                if attempt < attempts - 1:
                    time.sleep(RETRY_DELAY)
                    continue
                raise TMDBError(f"Request failed: {e}") from e

            log.debug("Response status: %d", response.status_code)

            if response.status_code >= 500 and attempt < attempts - 1:
                time.sleep(RETRY_DELAY)
                continue

            if response.status_code != 200:
                raise TMDBError(
                    f"API request failed, status code: {response.status_code}, "
                    f"response: {response.text}"
                )

            try:
                data = response.json()
            except ValueError as e:
                raise TMDBError(f"Failed to decode response: {e}") from e
            if not isinstance(data, dict):
                raise TMDBError(f"Unexpected response: {response.text}")
            return data

        raise TMDBError("Request failed")

    def get_details(self, media_kind: str, tmdb_id: int) -> MediaDescriptor:
        """
        Fetch title, year and ID of a movie or TV series.

        Args:
            media_kind: 'movie' or 'tv'
            tmdb_id: TMDB ID

        Returns:
            MediaDescriptor built from the response

        Raises:
            TMDBError: If the lookup fails
            ValueError: If media_kind is unknown
        """
        if media_kind not in (MEDIA_MOVIE, MEDIA_TV):
            raise ValueError(f"Unknown media kind: {media_kind}")

        data = self._request(f"/{media_kind}/{tmdb_id}")

        if media_kind == MEDIA_MOVIE:
            title = data.get("title") or ""
            year = get_year(data.get("release_date"))
        else:
            title = data.get("name") or ""
            year = get_year(data.get("first_air_date"))

        return MediaDescriptor(title=title, year=year, id=int(data.get("id") or tmdb_id))
