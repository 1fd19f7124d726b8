import unittest
from datetime import datetime, timedelta, timezone

from ratelimit_header_parser.reset import (
    parse_reset_auto,
    parse_reset_date,
    parse_reset_milliseconds,
    parse_reset_seconds,
    parse_reset_unix,
    resolve_reset,
    to_int,
)

NOW = datetime(2026, 2, 18, 12, 0, 0, tzinfo=timezone.utc)
THAT_DAY = datetime(2023, 5, 16, 18, 12, 13, tzinfo=timezone.utc)


class TestToInt(unittest.TestCase):
    def test_leading_integer(self):
        self.assertEqual(to_int("42"), 42)
        self.assertEqual(to_int("  -7"), -7)
        self.assertEqual(to_int("10s"), 10)
        self.assertEqual(to_int("1.9"), 1)
        self.assertEqual(to_int(5), 5)

    def test_not_a_number(self):
        self.assertIsNone(to_int(None))
        self.assertIsNone(to_int(""))
        self.assertIsNone(to_int("soon"))

    def test_ascii_digits_only(self):
        self.assertIsNone(to_int("\u0664\u0662"))

    def test_oversized_digit_run(self):
        self.assertIsNone(to_int("9" * 5000))
        self.assertIsNone(resolve_reset("9" * 5000, now=NOW))
        self.assertIsNone(resolve_reset("9" * 5000, "unix", now=NOW))


class TestAutoDetection(unittest.TestCase):
    def test_unix_timestamp(self):
        self.assertEqual(parse_reset_auto("1684260733", now=NOW), THAT_DAY)

    def test_date_string(self):
        self.assertEqual(
            parse_reset_auto("Tuesday, May 16, 2023 11:42:13 PM GMT+05:30", now=NOW), THAT_DAY
        )

    def test_delta_seconds(self):
        self.assertEqual(parse_reset_auto("42", now=NOW), NOW + timedelta(seconds=42))

    def test_threshold_is_exclusive(self):
        self.assertEqual(
            parse_reset_auto("1000000000", now=NOW), NOW + timedelta(seconds=1_000_000_000)
        )
        self.assertEqual(
            parse_reset_auto("1000000001", now=NOW),
            datetime(2001, 9, 9, 1, 46, 41, tzinfo=timezone.utc),
        )

    def test_milliseconds_timestamp_is_not_detected(self):
        # Read as unix seconds, which is far beyond year 9999.
        self.assertIsNone(parse_reset_auto("1684260733000", now=NOW))

    def test_defaults_to_current_time(self):
        before = datetime.now(timezone.utc)
        got = parse_reset_auto("42")
        after = datetime.now(timezone.utc)
        assert got is not None
        self.assertLessEqual(before + timedelta(seconds=42), got)
        self.assertLessEqual(got, after + timedelta(seconds=42))


class TestDateParsing(unittest.TestCase):
    def test_http_date(self):
        self.assertEqual(parse_reset_date("Tue, 16 May 2023 18:12:13 GMT"), THAT_DAY)

    def test_iso_8601(self):
        self.assertEqual(parse_reset_date("2023-05-16T18:12:13Z"), THAT_DAY)
        self.assertEqual(parse_reset_date("2023-05-16T20:12:13+02:00"), THAT_DAY)

    def test_javascript_date_string(self):
        self.assertEqual(
            parse_reset_date("Tue May 16 2023 23:42:13 GMT+0530 (India Standard Time)"), THAT_DAY
        )

    def test_naive_date_is_utc(self):
        self.assertEqual(parse_reset_date("May 16, 2023 18:12:13"), THAT_DAY)

    def test_garbage_is_none(self):
        self.assertIsNone(parse_reset_date("not a date"))
        self.assertIsNone(parse_reset_auto("soon", now=NOW))


class TestExplicitModes(unittest.TestCase):
    def test_unix(self):
        self.assertEqual(parse_reset_unix("1684260733"), THAT_DAY)
        self.assertEqual(resolve_reset("1684260733", "unix", now=NOW), THAT_DAY)

    def test_seconds(self):
        self.assertEqual(parse_reset_seconds("90", now=NOW), NOW + timedelta(seconds=90))
        # Explicit mode wins over the timestamp heuristic.
        self.assertEqual(
            resolve_reset("1684260733", "seconds", now=NOW), NOW + timedelta(seconds=1684260733)
        )

    def test_milliseconds(self):
        self.assertEqual(
            parse_reset_milliseconds("1500", now=NOW), NOW + timedelta(milliseconds=1500)
        )
        self.assertEqual(
            resolve_reset("60000", "milliseconds", now=NOW), NOW + timedelta(seconds=60)
        )

    def test_date(self):
        self.assertEqual(resolve_reset("Tue, 16 May 2023 18:12:13 GMT", "date", now=NOW), THAT_DAY)

    def test_unparseable_values(self):
        self.assertIsNone(resolve_reset("soon", "unix", now=NOW))
        self.assertIsNone(resolve_reset("soon", "seconds", now=NOW))
        self.assertIsNone(resolve_reset("soon", "milliseconds", now=NOW))
        self.assertIsNone(resolve_reset("n/a", "date", now=NOW))

    def test_empty_input(self):
        for mode in (None, "date", "unix", "seconds", "milliseconds"):
            self.assertIsNone(resolve_reset("", mode, now=NOW))
            self.assertIsNone(resolve_reset(None, mode, now=NOW))

    def test_naive_now_is_treated_as_utc(self):
        naive = datetime(2026, 2, 18, 12, 0, 0)
        self.assertEqual(resolve_reset("5", "seconds", now=naive), NOW + timedelta(seconds=5))


if __name__ == "__main__":
    unittest.main()
