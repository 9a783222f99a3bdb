"""
Unit tests for countdown.py

Tests countdown arithmetic and DST transition detection.
"""

import unittest
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from spring_almanac.api.astronomy.countdown import countdown_to, get_countdowns, next_dst_start


class TestCountdownTo(unittest.TestCase):
    """Test suite for countdown_to"""

    def test_breakdown(self):
        """Test splitting into days, hours, minutes and seconds"""
        now = datetime(2025, 3, 1, 0, 0, 0, tzinfo=UTC)
        target = now + timedelta(days=19, hours=9, minutes=1, seconds=30, milliseconds=250)
        result = countdown_to(target, now)

        self.assertEqual((result.days, result.hours, result.minutes, result.seconds), (19, 9, 1, 30))
        self.assertEqual(result.total_ms, (19 * 86400 + 9 * 3600 + 60 + 30) * 1000 + 250)

    def test_clamped_after_target(self):
        """Test that a passed target gives all zeros"""
        now = datetime(2025, 3, 21, tzinfo=UTC)
        result = countdown_to(datetime(2025, 3, 20, 9, 1, tzinfo=UTC), now)
        self.assertEqual((result.days, result.hours, result.minutes, result.seconds, result.total_ms), (0, 0, 0, 0, 0))

    def test_target_equals_now(self):
        """Test that a target equal to now gives zero"""
        now = datetime(2025, 3, 20, 9, 1, tzinfo=UTC)
        self.assertEqual(countdown_to(now, now).total_ms, 0)

    def test_naive_target_is_utc(self):
        """Test that naive targets are read as UTC"""
        now = datetime(2025, 3, 20, 8, 0, tzinfo=UTC)
        result = countdown_to(datetime(2025, 3, 20, 9, 0), now)
        self.assertEqual(result.hours, 1)
        self.assertEqual(result.target.tzinfo, UTC)

    def test_to_dict(self):
        """Test the wire form of a countdown"""
        now = datetime(2025, 3, 20, 8, 0, tzinfo=UTC)
        data = countdown_to(now + timedelta(seconds=2), now).to_dict()
        self.assertEqual(data["totalMs"], 2000)
        self.assertEqual(data["target"], "2025-03-20T08:00:02+00:00")


class TestNextDstStart(unittest.TestCase):
    """Test suite for next_dst_start"""

    def test_new_york_2025(self):
        """Test the US spring-forward instant"""
        result = next_dst_start(datetime(2025, 1, 15, tzinfo=UTC), "America/New_York")
        self.assertEqual(result, datetime(2025, 3, 9, 7, 0, tzinfo=UTC))

    def test_london_2025(self):
        """Test the EU spring-forward instant"""
        result = next_dst_start(datetime(2025, 1, 15, tzinfo=UTC), ZoneInfo("Europe/London"))
        self.assertEqual(result, datetime(2025, 3, 30, 1, 0, tzinfo=UTC))

    def test_after_transition_finds_next_year(self):
        """Test that a search started in summer finds next spring"""
        result = next_dst_start(datetime(2025, 6, 1, tzinfo=UTC), "America/New_York")
        self.assertEqual(result, datetime(2026, 3, 8, 7, 0, tzinfo=UTC))

    def test_zone_without_dst(self):
        """Test that zones without DST give None"""
        self.assertIsNone(next_dst_start(datetime(2025, 1, 15, tzinfo=UTC), "UTC"))
        self.assertIsNone(next_dst_start(datetime(2025, 1, 15, tzinfo=UTC), "Asia/Tokyo"))


class TestGetCountdowns(unittest.TestCase):
    """Test suite for get_countdowns"""

    def test_both_countdowns(self):
        """Test that both countdowns are returned"""
        now = datetime(2025, 3, 1, tzinfo=UTC)
        result = get_countdowns(now, datetime(2025, 3, 20, 9, 1, tzinfo=UTC), datetime(2025, 3, 9, 7, tzinfo=UTC))
        self.assertEqual(result["spring"]["days"], 19)
        self.assertEqual(result["dst"]["days"], 8)

    def test_no_dst(self):
        """Test that the DST countdown is None without a target"""
        now = datetime(2025, 3, 1, tzinfo=UTC)
        self.assertIsNone(get_countdowns(now, datetime(2025, 3, 20, tzinfo=UTC), None)["dst"])


if __name__ == "__main__":
    unittest.main()
