"""
Unit tests for almanac.py

Tests assembly of the combined almanac document. Sun and moon calculations
are patched out.
"""

import unittest
from datetime import UTC, datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

from spring_almanac.api.almanac import (
    build_almanac_payload,
    build_countdown_payload,
    get_dst_target,
    get_spring_target,
    season_events,
)
from spring_almanac.api.astronomy.moon import MoonInfo, MoonPhaseInfo, MoonPosition, MoonTimes
from spring_almanac.api.astronomy.sun import SeasonEvent
from spring_almanac.api.catalogs.constellations import load_catalog
from spring_almanac.api.catalogs.lore import AstronomicalEvent, load_library
from spring_almanac.api.core.enums import EventType, MoonPhase
from spring_almanac.api.core.settings import AlmanacSettings


NEW_YORK = ZoneInfo("America/New_York")
NOW = datetime(2025, 1, 15, 2, 0, tzinfo=UTC)
EQUINOX_2025 = datetime(2025, 3, 20, 9, 1, tzinfo=UTC)
SOLSTICE_2024 = datetime(2024, 12, 21, 9, 20, tzinfo=UTC)


def _seasons(year):
    return [
        SeasonEvent("Vernal Equinox", datetime(year, 3, 20, 9, 1, tzinfo=UTC), 0),
        SeasonEvent("Summer Solstice", datetime(year, 6, 21, 2, 42, tzinfo=UTC), 1),
        SeasonEvent("Autumnal Equinox", datetime(year, 9, 22, 18, 19, tzinfo=UTC), 2),
        SeasonEvent("Winter Solstice", datetime(year, 12, 21, 15, 3, tzinfo=UTC), 3),
    ]


class TestTargets(unittest.TestCase):
    """Test suite for spring and DST targets"""

    def test_configured_spring_equinox(self):
        """Test that a configured equinox is used as is"""
        settings = AlmanacSettings(spring_equinox=EQUINOX_2025)
        self.assertEqual(get_spring_target(NOW, settings), EQUINOX_2025)

    @patch("spring_almanac.api.almanac.next_spring_equinox")
    def test_computed_spring_equinox(self, mock_next):
        """Test that the equinox is computed when not configured"""
        mock_next.return_value = EQUINOX_2025
        self.assertEqual(get_spring_target(NOW, AlmanacSettings()), EQUINOX_2025)
        mock_next.assert_called_once_with(NOW)

    def test_configured_dst_start(self):
        """Test that a configured DST start is used for any zone"""
        dst = datetime(2025, 3, 9, 7, 0, tzinfo=UTC)
        self.assertEqual(get_dst_target(NOW, ZoneInfo("UTC"), AlmanacSettings(dst_start=dst)), dst)

    def test_computed_dst_start(self):
        """Test the zone's own transition"""
        self.assertEqual(get_dst_target(NOW, NEW_YORK, AlmanacSettings()), datetime(2025, 3, 9, 7, 0, tzinfo=UTC))

    def test_countdown_payload(self):
        """Test the countdown document"""
        settings = AlmanacSettings(spring_equinox=EQUINOX_2025)
        payload = build_countdown_payload(NOW, NEW_YORK, settings)
        self.assertEqual(payload["spring"]["days"], 64)
        self.assertEqual(payload["dst"]["target"], "2025-03-09T07:00:00+00:00")


class TestSeasonEvents(unittest.TestCase):
    """Test suite for season_events"""

    @patch("spring_almanac.api.almanac.find_season_events", side_effect=_seasons)
    def test_two_years(self, mock_find):
        """Test that this year's and next year's seasons are returned"""
        events = season_events(NOW)
        self.assertEqual(len(events), 8)
        self.assertEqual(events[0].name, "March Equinox")
        self.assertEqual(events[0].type, EventType.EQUINOX)
        self.assertEqual(events[3].type, EventType.SOLSTICE)

    @patch("spring_almanac.api.almanac.find_season_events", side_effect=_seasons)
    def test_skips_duplicates(self, mock_find):
        """Test that an existing event of the same type on the same day is kept instead"""
        equinox = datetime(2025, 3, 20, 9, 1, tzinfo=UTC)
        existing = [AstronomicalEvent("Spring Equinox", equinox, "d", EventType.EQUINOX)]
        events = season_events(NOW, existing)
        self.assertEqual(len(events), 7)
        self.assertNotIn(datetime(2025, 3, 20, 9, 1, tzinfo=UTC), [event.date for event in events])


class TestBuildAlmanacPayload(unittest.TestCase):
    """Test suite for build_almanac_payload"""

    def setUp(self):
        """Set up patches for the sun and moon calculations"""
        moon = MoonInfo(
            phase=MoonPhaseInfo(0.52, MoonPhase.FULL_MOON, 99, "🌕", "Full", 12.0),
            position=MoonPosition(35.0, 95.0, 380000.0, -20.0),
            times=MoonTimes(rise=datetime(2025, 1, 14, 22, 0, tzinfo=UTC)),
            next_full_moon=datetime(2025, 2, 12, 13, 53, tzinfo=UTC),
            next_new_moon=datetime(2025, 1, 29, 12, 36, tzinfo=UTC),
            zodiac_sign="Cancer ♋",
        )
        patches = {
            "find_season_events": patch("spring_almanac.api.almanac.find_season_events", side_effect=_seasons),
            "next_spring_equinox": patch("spring_almanac.api.almanac.next_spring_equinox", return_value=EQUINOX_2025),
            "previous_winter_solstice": patch(
                "spring_almanac.api.almanac.previous_winter_solstice", return_value=SOLSTICE_2024
            ),
            "get_moon_info": patch("spring_almanac.api.almanac.get_moon_info", return_value=moon),
            "get_daylight_info": patch(
                "spring_almanac.api.almanac.get_daylight_info", return_value={"sunrise": "7:15 AM"}
            ),
            "get_daylight_gain": patch(
                "spring_almanac.api.almanac.get_daylight_gain", return_value={"formatted": "+1m 30s"}
            ),
            "get_spring_progress": patch(
                "spring_almanac.api.almanac.get_spring_progress", return_value={"percentComplete": 15}
            ),
        }
        self.mocks = {}
        for name, p in patches.items():
            self.mocks[name] = p.start()
            self.addCleanup(p.stop)

        self.catalog = load_catalog()
        self.library = load_library()

    def test_document_keys(self):
        """Test that every section of the document is present"""
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, AlmanacSettings())
        self.assertEqual(
            set(payload),
            {
                "timestamp",
                "location",
                "countdowns",
                "daylight",
                "daylightGain",
                "springProgress",
                "moon",
                "constellations",
                "skyLore",
                "upcomingEvents",
            },
        )
        self.assertEqual(payload["timestamp"], "2025-01-15T02:00:00+00:00")
        self.assertEqual(payload["location"], {"lat": 40.7128, "lon": -74.006, "timezone": "America/New_York"})
        self.assertEqual(payload["daylight"], {"sunrise": "7:15 AM"})
        self.assertEqual(payload["springProgress"], {"percentComplete": 15})

    def test_moon_section(self):
        """Test the moon section"""
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, AlmanacSettings())
        moon = payload["moon"]
        self.assertEqual(moon["phase"]["phaseName"], "Full Moon")
        self.assertEqual(moon["times"], {"rise": "5:00 PM", "set": "--"})
        self.assertEqual(moon["nextNewMoon"], "2025-01-29T12:36:00+00:00")
        self.assertEqual(moon["zodiacSign"], "Cancer ♋")

    def test_counts_follow_settings(self):
        """Test that list sizes follow the configured counts"""
        settings = AlmanacSettings(top_constellations=2, lore_count=1, event_count=4)
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, settings)
        self.assertEqual(len(payload["constellations"]), 2)
        self.assertEqual(len(payload["skyLore"]), 1)
        self.assertEqual(len(payload["upcomingEvents"]), 4)

    def test_orion_ranked_first_group(self):
        """Test that Orion appears among the constellations for New York in January"""
        settings = AlmanacSettings(top_constellations=50)
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, settings)
        names = [c["name"] for c in payload["constellations"]]
        self.assertIn("Orion", names)
        self.assertNotIn("Virgo", names)
        orion = payload["constellations"][names.index("Orion")]
        self.assertEqual(orion["currentDirection"], "SSE")

    def test_upcoming_events_are_future_and_sorted(self):
        """Test that upcoming events are after now, soonest first"""
        settings = AlmanacSettings(event_count=10)
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, settings)
        dates = [datetime.fromisoformat(event["date"]) for event in payload["upcomingEvents"]]
        self.assertEqual(dates, sorted(dates))
        self.assertTrue(all(date > NOW for date in dates))

    def test_countdowns(self):
        """Test that the countdowns use the computed equinox"""
        payload = build_almanac_payload(NOW, 40.7128, -74.006, NEW_YORK, self.catalog, self.library, AlmanacSettings())
        self.assertEqual(payload["countdowns"]["spring"]["target"], "2025-03-20T09:01:00+00:00")
        self.assertIsNotNone(payload["countdowns"]["dst"])
        self.mocks["get_spring_progress"].assert_called_once_with(
            NOW, 40.7128, -74.006, NEW_YORK, SOLSTICE_2024, EQUINOX_2025
        )


if __name__ == "__main__":
    unittest.main()
