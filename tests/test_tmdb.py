"""Tests for the TMDB client."""
from unittest.mock import MagicMock, patch

import pytest
import requests

from recognition.models import MEDIA_MOVIE, MEDIA_TV, MediaDescriptor
from recognition.tmdb import TMDBClient, TMDBError, get_year, parse_tmdb_id


def make_response(status_code=200, data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(data, Exception):
        response.json.side_effect = data
    else:
        response.json.return_value = data
    return response


@pytest.fixture
def no_sleep():
    with patch("recognition.tmdb.time.sleep") as sleep:
        yield sleep


class TestGetDetails:

    def test_movie(self):
        data = {"id": 603, "title": "黑客帝国", "release_date": "1999-03-30"}
        with patch("recognition.tmdb.requests.get", return_value=make_response(data=data)) as get:
            descriptor = TMDBClient("key").get_details(MEDIA_MOVIE, 603)

        assert descriptor == MediaDescriptor(title="黑客帝国", year="1999", id=603)
        args, kwargs = get.call_args
        assert args[0] == "https://api.themoviedb.org/3/movie/603"
        assert kwargs["params"] == {"api_key": "key", "language": "zh-CN"}
        assert kwargs["headers"] == {"accept": "application/json"}
        assert kwargs["timeout"] == 10

    def test_tv_uses_name_and_first_air_date(self):
        data = {"id": 65942, "name": "大宅门", "first_air_date": "2013-05-01",
                "title": "ignored", "release_date": "1990-01-01"}
        with patch("recognition.tmdb.requests.get", return_value=make_response(data=data)) as get:
            descriptor = TMDBClient("key", base_url="http://tmdb.test/3/").get_details(MEDIA_TV, 65942)

        assert descriptor == MediaDescriptor(title="大宅门", year="2013", id=65942)
        assert get.call_args[0][0] == "http://tmdb.test/3/tv/65942"

    def test_missing_date(self):
        data = {"id": 1, "name": "Show", "first_air_date": ""}
        with patch("recognition.tmdb.requests.get", return_value=make_response(data=data)):
            descriptor = TMDBClient("key").get_details(MEDIA_TV, 1)

        assert descriptor.year == ""

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            TMDBClient("key").get_details("series", 1)


class TestErrors:

    def test_non_200_reports_status_and_body(self):
        response = make_response(401, text='{"status_message": "Invalid API key"}')
        with patch("recognition.tmdb.requests.get", return_value=response):
            with pytest.raises(TMDBError) as exc_info:
                TMDBClient("bad").get_details(MEDIA_MOVIE, 603)

        assert "401" in str(exc_info.value)
        assert "Invalid API key" in str(exc_info.value)

    def test_not_found_is_not_retried(self, no_sleep):
        with patch("recognition.tmdb.requests.get", return_value=make_response(404)) as get:
            with pytest.raises(TMDBError):
                TMDBClient("key").get_details(MEDIA_MOVIE, 1)

        assert get.call_count == 1

    def test_malformed_json(self):
        response = make_response(data=ValueError("Expecting value"), text="<html>")
        with patch("recognition.tmdb.requests.get", return_value=response):
            with pytest.raises(TMDBError, match="decode"):
                TMDBClient("key").get_details(MEDIA_MOVIE, 603)

    def test_non_object_json(self):
        with patch("recognition.tmdb.requests.get", return_value=make_response(data=[1, 2])):
            with pytest.raises(TMDBError):
                TMDBClient("key").get_details(MEDIA_MOVIE, 603)

    def test_server_error_is_retried_once(self, no_sleep):
        responses = [
            make_response(502, text="bad gateway"),
            make_response(data={"id": 603, "title": "黑客帝国", "release_date": "1999-03-30"}),
        ]
        with patch("recognition.tmdb.requests.get", side_effect=responses) as get:
            descriptor = TMDBClient("key").get_details(MEDIA_MOVIE, 603)

        assert descriptor.title == "黑客帝国"
        assert get.call_count == 2

    def test_server_error_twice(self, no_sleep):
        with patch("recognition.tmdb.requests.get", return_value=make_response(503, text="down")) as get:
            with pytest.raises(TMDBError, match="503"):
                TMDBClient("key").get_details(MEDIA_MOVIE, 603)

        assert get.call_count == 2

    def test_connection_error(self, no_sleep):
        error = requests.exceptions.ConnectionError("connection reset")
        with patch("recognition.tmdb.requests.get", side_effect=error) as get:
            with pytest.raises(TMDBError, match="connection reset"):
                TMDBClient("key").get_details(MEDIA_TV, 1)

        assert get.call_count == 2

    def test_empty_api_key(self):
        with pytest.raises(TMDBError):
            TMDBClient("")


@pytest.mark.parametrize("date, year", [
    ("1999-03-30", "1999"),
    ("", ""),
    (None, ""),
    ("1999", ""),
    ("not a date", ""),
])
def test_get_year(date, year):
    assert get_year(date) == year


@pytest.mark.parametrize("text, expected", [
    ("603", (603, None)),
    (" 603 ", (603, None)),
    ("tv:1399", (1399, "tv")),
    ("MOVIE:603", (603, "movie")),
    ("https://www.themoviedb.org/tv/1399-game-of-thrones", (1399, "tv")),
    ("https://www.themoviedb.org/movie/603", (603, "movie")),
    ("abc", (None, None)),
    ("-5", (None, None)),
    ("", (None, None)),
])
def test_parse_tmdb_id(text, expected):
    assert parse_tmdb_id(text) == expected
