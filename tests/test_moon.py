"""
Unit tests for moon.py

Tests phase naming, the phase search, zodiac sign and rise/set formatting.
"""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import deal

from spring_almanac.api.astronomy.moon import (
    PHASE_DESCRIPTIONS,
    ZODIAC_SIGNS,
    MoonPhaseInfo,
    MoonPosition,
    MoonTimes,
    bright_limb_angle,
    find_next_phase,
    format_moon_times,
    get_moon_info,
    get_moon_phase,
    get_moon_phase_values,
    get_moon_times,
    get_moon_zodiac,
    phase_emoji,
    phase_name,
)
from spring_almanac.api.core.enums import MoonPhase


NEW_YORK = ZoneInfo("America/New_York")


class TestPhaseName(unittest.TestCase):
    """Test suite for phase_name and phase_emoji"""

    def test_principal_phases(self):
        """Test the names at the principal phases"""
        self.assertEqual(phase_name(0.0), MoonPhase.NEW_MOON)
        self.assertEqual(phase_name(0.25), MoonPhase.FIRST_QUARTER)
        self.assertEqual(phase_name(0.5), MoonPhase.FULL_MOON)
        self.assertEqual(phase_name(0.75), MoonPhase.LAST_QUARTER)

    def test_sector_boundaries(self):
        """Test that each boundary belongs to the following sector"""
        self.assertEqual(phase_name(0.0624), MoonPhase.NEW_MOON)
        self.assertEqual(phase_name(0.0625), MoonPhase.WAXING_CRESCENT)
        self.assertEqual(phase_name(0.4375), MoonPhase.FULL_MOON)
        self.assertEqual(phase_name(0.5625), MoonPhase.WANING_GIBBOUS)
        self.assertEqual(phase_name(0.9375), MoonPhase.NEW_MOON)

    def test_wraps_to_new_moon(self):
        """Test that the end of the cycle is New Moon again"""
        self.assertEqual(phase_name(0.99), MoonPhase.NEW_MOON)
        self.assertEqual(phase_emoji(0.99), "🌑")

    def test_emoji(self):
        """Test emoji for a few phases"""
        self.assertEqual(phase_emoji(0.5), "🌕")
        self.assertEqual(phase_emoji(0.125), "🌒")
        self.assertEqual(phase_emoji(0.875), "🌘")

    def test_every_phase_has_description(self):
        """Test that every phase name has a description"""
        for phase in MoonPhase:
            self.assertIn(phase, PHASE_DESCRIPTIONS)


class TestMoonZodiac(unittest.TestCase):
    """Test suite for get_moon_zodiac"""

    def test_reference_instant_is_aries(self):
        """Test that the reference instant starts in Aries"""
        self.assertEqual(get_moon_zodiac(datetime(2000, 1, 6, 18, 14, tzinfo=UTC)), "Aries ♈")

    def test_advances_one_sign(self):
        """Test that a twelfth of a sidereal month later is Taurus"""
        start = datetime(2000, 1, 6, 18, 14, tzinfo=UTC)
        later = start + timedelta(days=27.321661 / 12 * 1.5)
        self.assertEqual(get_moon_zodiac(later), "Taurus ♉")

    def test_always_a_sign(self):
        """Test that any date gives a known sign"""
        for day in range(0, 60, 3):
            self.assertIn(get_moon_zodiac(datetime(2025, 1, 1, tzinfo=UTC) + timedelta(days=day)), ZODIAC_SIGNS)


class TestFindNextPhase(unittest.TestCase):
    """Test suite for find_next_phase"""

    def setUp(self):
        """Set up test fixtures"""
        self.start = datetime(2025, 1, 1, tzinfo=UTC)

    def _linear_phases(self, times: list[datetime]) -> list[float]:
        return [((when - self.start).total_seconds() / 3600 / 1000) % 1.0 for when in times]

    def test_finds_first_matching_hour(self):
        """Test that the search returns the first hour within tolerance"""
        result = find_next_phase(self.start, 0.1055, self._linear_phases)
        self.assertEqual(result, self.start + timedelta(hours=86))

    def test_match_at_start(self):
        """Test that the start hour itself can match"""
        self.assertEqual(find_next_phase(self.start, 0.01, self._linear_phases), self.start)

    def test_phases_requested_in_one_call(self):
        """Test that every hour of the window is evaluated in a single call"""
        phase_at = MagicMock(side_effect=self._linear_phases)
        find_next_phase(self.start, 0.9, phase_at, max_hours=48)
        phase_at.assert_called_once()
        (times,) = phase_at.call_args.args
        self.assertEqual(len(times), 48)
        self.assertEqual(times[0], self.start)
        self.assertEqual(times[-1], self.start + timedelta(hours=47))

    def test_fallback_estimate(self):
        """Test the synodic-month estimate when the search is exhausted"""
        with self.assertLogs("spring_almanac.api.astronomy.moon", level="WARNING"):
            result = find_next_phase(self.start, 0.5, lambda times: [0.25] * len(times), max_hours=10)
        self.assertAlmostEqual((result - self.start).total_seconds(), 0.25 * 29.53 * 86400, places=3)

    def test_fallback_wraps_forward(self):
        """Test that the fallback always looks forward"""
        with self.assertLogs("spring_almanac.api.astronomy.moon", level="WARNING"):
            result = find_next_phase(self.start, 0.0, lambda times: [0.5] * len(times), max_hours=1)
        self.assertGreater(result, self.start)

    def test_rejects_empty_window(self):
        """Test that a search of zero hours is refused"""
        with self.assertRaises(deal.PreContractError):
            find_next_phase(self.start, 0.5, self._linear_phases, max_hours=0)


class TestGetMoonPhaseValues(unittest.TestCase):
    """Test suite for get_moon_phase_values"""

    @patch("spring_almanac.api.astronomy.moon.almanac")
    @patch("spring_almanac.api.astronomy.moon.to_skyfield_times")
    @patch("spring_almanac.api.astronomy.moon.get_ephemeris")
    def test_single_array_call(self, mock_eph, mock_times, mock_almanac):
        """Test that all instants go to Skyfield as one array and come back as fractions of a cycle"""
        mock_almanac.moon_phase.return_value.degrees = [0.0, 90.0, 180.0, 270.0]
        dates = [datetime(2025, 1, 1, hour, tzinfo=UTC) for hour in range(4)]

        values = get_moon_phase_values(dates)

        self.assertEqual(values, [0.0, 0.25, 0.5, 0.75])
        mock_times.assert_called_once_with(dates)
        mock_almanac.moon_phase.assert_called_once_with(mock_eph.return_value, mock_times.return_value)



class TestBrightLimbAngle(unittest.TestCase):
    """Test suite for bright_limb_angle"""

    def test_sun_due_east(self):
        """Test that a Sun one hour east on the equator lights the eastern limb"""
        self.assertAlmostEqual(bright_limb_angle(1.0, 0.0, 0.0, 0.0), 90.0)

    def test_sun_due_west(self):
        """Test that a Sun one hour west on the equator lights the western limb"""
        self.assertAlmostEqual(bright_limb_angle(0.0, 0.0, 1.0, 0.0), -90.0)


class TestFormatMoonTimes(unittest.TestCase):
    """Test suite for format_moon_times"""

    def test_rise_and_set(self):
        """Test formatting of normal rise and set times"""
        times = MoonTimes(
            rise=datetime(2025, 1, 15, 0, 15, tzinfo=UTC),
            set=datetime(2025, 1, 15, 15, 5, tzinfo=UTC),
        )
        self.assertEqual(format_moon_times(times, NEW_YORK), {"rise": "7:15 PM", "set": "10:05 AM"})

    def test_missing_event(self):
        """Test that a missing event is shown as --"""
        times = MoonTimes(rise=datetime(2025, 1, 15, 17, 0, tzinfo=UTC))
        self.assertEqual(format_moon_times(times, NEW_YORK), {"rise": "12:00 PM", "set": "--"})

    def test_always_up(self):
        """Test a Moon that never sets"""
        result = format_moon_times(MoonTimes(always_up=True), NEW_YORK)
        self.assertEqual(result, {"rise": "Always up", "set": "Always up"})

    def test_always_down(self):
        """Test a Moon that never rises"""
        result = format_moon_times(MoonTimes(always_down=True), NEW_YORK)
        self.assertEqual(result, {"rise": "Always down", "set": "Always down"})


class TestGetMoonPhase(unittest.TestCase):
    """Test suite for get_moon_phase"""

    @patch("spring_almanac.api.astronomy.moon.almanac")
    @patch("spring_almanac.api.astronomy.moon.to_skyfield_time")
    @patch("spring_almanac.api.astronomy.moon.get_ephemeris")
    def test_full_moon(self, mock_eph, mock_time, mock_almanac):
        """Test phase, illumination, sector and bright limb assembled from Skyfield results"""
        mock_almanac.moon_phase.return_value.degrees = 180.0
        mock_almanac.fraction_illuminated.return_value = 0.996

        def observed(ra_hours, dec_degrees):
            body = MagicMock()
            body.apparent.return_value.radec.return_value = (
                SimpleNamespace(hours=ra_hours),
                SimpleNamespace(degrees=dec_degrees),
                None,
            )
            return body

        earth = MagicMock()
        bodies = {"sun": observed(1.0, 0.0), "moon": observed(0.0, 0.0)}
        earth.at.return_value.observe.side_effect = lambda body: bodies[body]
        mock_eph.return_value = {"earth": earth, "sun": "sun", "moon": "moon"}

        info = get_moon_phase(datetime(2025, 1, 13, 22, 27, tzinfo=UTC))

        self.assertEqual(info.phase, 0.5)
        self.assertEqual(info.phase_name, MoonPhase.FULL_MOON)
        self.assertEqual(info.illumination, 100)
        self.assertEqual(info.emoji, "🌕")
        self.assertEqual(info.description, PHASE_DESCRIPTIONS[MoonPhase.FULL_MOON])
        self.assertAlmostEqual(info.angle, 90.0)


@patch("spring_almanac.api.astronomy.moon.almanac")
@patch("spring_almanac.api.astronomy.moon.get_ephemeris", return_value={"moon": "moon"})
class TestGetMoonTimes(unittest.TestCase):
    """Test suite for get_moon_times"""

    def setUp(self):
        """Set up test fixtures"""
        self.date = datetime(2025, 1, 15, 17, 0, tzinfo=UTC)
        self.rise = datetime(2025, 1, 15, 14, 0, tzinfo=UTC)
        self.set = datetime(2025, 1, 16, 2, 0, tzinfo=UTC)

    @patch("spring_almanac.api.astronomy.moon.find_events")
    def test_rise_and_set(self, mock_find, mock_eph, mock_almanac):
        """Test that the first rise and first set of the day are kept"""
        later_rise = datetime(2025, 1, 16, 4, 0, tzinfo=UTC)
        mock_find.return_value = (0, [(self.rise, 1), (self.set, 0), (later_rise, 1)])

        times = get_moon_times(self.date, 40.7, -74.0, NEW_YORK)

        self.assertEqual(times, MoonTimes(rise=self.rise, set=self.set))
        start, end, _ = mock_find.call_args.args
        self.assertEqual(start, datetime(2025, 1, 15, 5, 0, tzinfo=UTC))
        self.assertEqual(end, datetime(2025, 1, 16, 5, 0, tzinfo=UTC))

    @patch("spring_almanac.api.astronomy.moon.find_events")
    def test_set_only(self, mock_find, mock_eph, mock_almanac):
        """Test a day where the Moon sets but does not rise"""
        mock_find.return_value = (1, [(self.set, 0)])
        self.assertEqual(get_moon_times(self.date, 40.7, -74.0, NEW_YORK), MoonTimes(set=self.set))

    @patch("spring_almanac.api.astronomy.moon.find_events", return_value=(1, []))
    def test_always_up(self, mock_find, mock_eph, mock_almanac):
        """Test that a Moon above the horizon all day is always up"""
        times = get_moon_times(self.date, 78.2, 15.6, ZoneInfo("Arctic/Longyearbyen"))
        self.assertTrue(times.always_up)
        self.assertFalse(times.always_down)
        self.assertIsNone(times.rise)
        self.assertIsNone(times.set)

    @patch("spring_almanac.api.astronomy.moon.find_events", return_value=(0, []))
    def test_always_down(self, mock_find, mock_eph, mock_almanac):
        """Test that a Moon below the horizon all day is always down"""
        times = get_moon_times(self.date, 78.2, 15.6, ZoneInfo("Arctic/Longyearbyen"))
        self.assertTrue(times.always_down)
        self.assertFalse(times.always_up)


class TestGetMoonInfo(unittest.TestCase):
    """Test suite for get_moon_info"""

    @patch("spring_almanac.api.astronomy.moon.get_moon_phase_values")
    @patch("spring_almanac.api.astronomy.moon.get_moon_times")
    @patch("spring_almanac.api.astronomy.moon.get_moon_position")
    @patch("spring_almanac.api.astronomy.moon.get_moon_phase")
    def test_combines_parts(self, mock_phase, mock_position, mock_times, mock_phase_values):
        """Test that the parts are combined for the observer"""
        now = datetime(2025, 1, 15, 2, 0, tzinfo=UTC)
        mock_phase.return_value = MoonPhaseInfo(0.5, MoonPhase.FULL_MOON, 100, "🌕", "Full", 10.0)
        mock_position.return_value = MoonPosition(30.0, 120.0, 384400.0, 5.0)
        mock_times.return_value = MoonTimes(always_up=True)

        def phase_values(times):
            return [0.5 if when >= now + timedelta(hours=5) else 0.3 for when in times]

        mock_phase_values.side_effect = phase_values

        info = get_moon_info(now, 40.7, -74.0, NEW_YORK)

        self.assertEqual(info.phase.phase_name, MoonPhase.FULL_MOON)
        self.assertEqual(info.position.distance, 384400.0)
        self.assertTrue(info.times.always_up)
        self.assertEqual(info.next_full_moon, now + timedelta(hours=5))
        self.assertIn(info.zodiac_sign, ZODIAC_SIGNS)
        mock_position.assert_called_once_with(now, 40.7, -74.0)
        mock_times.assert_called_once_with(now, 40.7, -74.0, NEW_YORK)
        self.assertEqual(mock_phase_values.call_count, 2)
        for call in mock_phase_values.call_args_list:
            self.assertEqual(len(call.args[0]), 720)

    def test_phase_info_to_dict(self):
        """Test the wire form of the phase"""
        data = MoonPhaseInfo(0.5, MoonPhase.FULL_MOON, 100, "🌕", "Full", 10.0).to_dict()
        self.assertEqual(data["phaseName"], "Full Moon")
        self.assertEqual(data["illumination"], 100)

    def test_position_to_dict(self):
        """Test the wire form of the position"""
        data = MoonPosition(30.0, 120.0, 384400.0, 5.0).to_dict()
        self.assertEqual(data["parallacticAngle"], 5.0)


if __name__ == "__main__":
    unittest.main()
