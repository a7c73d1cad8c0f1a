import datetime as dt
import unittest

import requests

from weather_alert.collaborators.meteo_feed import MeteoFeedSource, parse_record
from weather_alert.errors import FetchError, ParseError

RECORD = "19-Oct-2026 21:04:05  2  -3.4  81  771.2  256  12.7  2.3"
NEXT_RECORD = "19-Oct-2026 21:05:05  2  -3.5  81  771.1  250  15.1  2.4"


class DummyResp:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}


class FakeSession:
    def __init__(self, heads, gets):
        self.heads = list(heads)
        self.gets = list(gets)
        self.get_calls = []

    def head(self, url, **kwargs):
        resp = self.heads.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def get(self, url, **kwargs):
        self.get_calls.append(kwargs)
        resp = self.gets.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def _head(marker="Mon, 19 Oct 2026 21:04:10 GMT"):
    return DummyResp(200, headers={"Last-Modified": marker})


def _tail(*lines):
    return DummyResp(206, content=("\n".join(lines) + "\n").encode("ascii"))


class TestParseRecord(unittest.TestCase):
    def test_parses_wind_temperature_and_time(self):
        obs = parse_record(RECORD)
        self.assertEqual(obs.wind_speed, 12.7)
        self.assertEqual(obs.temperature, -3.4)
        self.assertEqual(obs.observed_at, dt.datetime(2026, 10, 19, 21, 4, 5, tzinfo=dt.timezone.utc))

    def test_short_record_rejected(self):
        with self.assertRaises(ParseError):
            parse_record("19-Oct-2026 21:04:05 2 -3.4")

    def test_bad_numbers_rejected(self):
        with self.assertRaises(ParseError):
            parse_record(RECORD.replace("12.7", "n/a"))
        with self.assertRaises(ParseError):
            parse_record(RECORD.replace("-3.4", "--"))

    def test_bad_timestamp_rejected(self):
        with self.assertRaises(ParseError):
            parse_record(RECORD.replace("19-Oct-2026", "2026-10-19"))


class TestMeteoFeedSource(unittest.TestCase):
    def test_reads_last_line_of_tail(self):
        session = FakeSession([_head()], [_tail("56  12.6  2.2", RECORD)])
        source = MeteoFeedSource("http://feed", session, tail_bytes=66)

        obs = source.get_latest()

        self.assertEqual(obs.wind_speed, 12.7)
        self.assertEqual(session.get_calls[0]["headers"], {"Range": "bytes=-66"})

    def test_unchanged_file_returns_cached_observation(self):
        session = FakeSession([_head(), _head()], [_tail(RECORD)])
        source = MeteoFeedSource("http://feed", session)

        first = source.get_latest()
        second = source.get_latest()

        self.assertIs(first, second)
        self.assertEqual(len(session.get_calls), 1)

    def test_changed_file_is_downloaded_again(self):
        session = FakeSession(
            [_head("a"), _head("b")],
            [_tail(RECORD), _tail(NEXT_RECORD)],
        )
        source = MeteoFeedSource("http://feed", session)

        source.get_latest()
        self.assertEqual(source.get_latest().wind_speed, 15.1)

    def test_missing_last_modified_always_downloads(self):
        session = FakeSession([DummyResp(200), DummyResp(200)], [_tail(RECORD), _tail(NEXT_RECORD)])
        source = MeteoFeedSource("http://feed", session)

        source.get_latest()
        source.get_latest()
        self.assertEqual(len(session.get_calls), 2)

    def test_failed_parse_does_not_cache_marker(self):
        session = FakeSession([_head(), _head()], [_tail("garbage"), _tail(RECORD)])
        source = MeteoFeedSource("http://feed", session)

        with self.assertRaises(ParseError):
            source.get_latest()
        self.assertEqual(source.get_latest().wind_speed, 12.7)

    def test_empty_tail_is_a_parse_error(self):
        session = FakeSession([_head()], [DummyResp(206, content=b"\n\n")])
        with self.assertRaises(ParseError):
            MeteoFeedSource("http://feed", session).get_latest()

    def test_head_failure_is_a_fetch_error(self):
        session = FakeSession([DummyResp(503)], [])
        with self.assertRaises(FetchError):
            MeteoFeedSource("http://feed", session).get_latest()

    def test_full_response_instead_of_range_is_a_fetch_error(self):
        session = FakeSession([_head()], [DummyResp(200, content=RECORD.encode())])
        with self.assertRaises(FetchError):
            MeteoFeedSource("http://feed", session).get_latest()

    def test_transport_error_is_a_fetch_error(self):
        session = FakeSession([requests.exceptions.ConnectionError("refused")], [])
        with self.assertRaises(FetchError):
            MeteoFeedSource("http://feed", session).get_latest()

        session = FakeSession([_head()], [requests.exceptions.Timeout("slow")])
        with self.assertRaises(FetchError):
            MeteoFeedSource("http://feed", session).get_latest()


if __name__ == "__main__":
    unittest.main()
