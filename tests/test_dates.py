"""
Tests for locale-aware date formatting, calendar phrases, humanize and timezones.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from tarjama.core import dates
from tarjama.core.errors import UnknownTimezoneError

# A Tuesday
MOMENT = datetime(2024, 3, 5, 14, 7, 9)
REFERENCE = datetime(2024, 3, 5, 10, 0)


class TestLocaleData:
    def test_names(self):
        assert dates.months("ar")[0] == "يناير"
        assert dates.weekdays("en")[0] == "Sunday"
        assert dates.weekdays_min("ar")[6] == "س"

    def test_falls_back_to_base_language_then_english(self):
        assert dates.locale_data("ar_SA") is dates.locale_data("ar")
        assert dates.locale_data("xx") is dates.locale_data("en")

    def test_load_date_data_lists_codes(self):
        assert dates.load_date_data() == ["ar", "en"]


class TestFormatDatetime:
    def test_numeric_tokens(self):
        assert dates.format_datetime(MOMENT, "YYYY-MM-DD HH:mm:ss", "en") == "2024-03-05 14:07:09"

    def test_long_english(self):
        assert dates.format_datetime(MOMENT, "LLLL", "en") == "Tuesday, March 5, 2024 2:07 PM"

    def test_literal_text_in_brackets(self):
        assert dates.format_datetime(MOMENT, "[Today at] LT", "en") == "Today at 2:07 PM"

    def test_twelve_hour_clock_at_midnight(self):
        assert dates.format_datetime(datetime(2024, 1, 1, 0, 5), "h:mm a", "en") == "12:05 am"

    def test_arabic_digits(self):
        assert dates.format_datetime(MOMENT, "LL", "ar") == "٥ مارس ٢٠٢٤"
        assert dates.format_datetime(MOMENT, "LT", "ar") == "١٤:٠٧"
        assert dates.format_datetime(MOMENT, "L", "ar") == "٥/\u200f٣/\u200f٢٠٢٤"

    def test_arabic_meridiem_and_comma(self):
        assert dates.format_datetime(MOMENT, "A", "ar") == "م"
        assert dates.format_datetime(MOMENT, "D, MMMM", "ar") == "٥، مارس"

    def test_utc_offset(self):
        aware = datetime(2024, 1, 1, 12, 0, tzinfo=ZoneInfo("Asia/Riyadh"))
        assert dates.format_datetime(aware, "Z", "en") == "+03:00"
        assert dates.format_datetime(datetime(2024, 1, 1), "Z", "en") == "+00:00"


class TestCalendar:
    @pytest.mark.parametrize("moment,expected", [
        (datetime(2024, 3, 5, 20, 0), "sameDay"),
        (datetime(2024, 3, 6, 9, 0), "nextDay"),
        (datetime(2024, 3, 4, 23, 0), "lastDay"),
        (datetime(2024, 3, 2, 12, 0), "lastWeek"),
        (datetime(2024, 2, 27, 12, 0), "sameElse"),
        (datetime(2024, 3, 8, 12, 0), "nextWeek"),
        (datetime(2024, 3, 15, 12, 0), "sameElse"),
    ])
    def test_calendar_key(self, moment, expected):
        assert dates.calendar_key(moment, REFERENCE) == expected

    def test_english_phrases(self):
        assert dates.calendar(datetime(2024, 3, 6, 9, 30), REFERENCE, "en") == "Tomorrow at 9:30 AM"
        assert dates.calendar(datetime(2024, 3, 2, 18, 0), REFERENCE, "en") == "Last Saturday at 6:00 PM"
        assert dates.calendar(datetime(2024, 1, 2, 8, 0), REFERENCE, "en") == "01/02/2024"

    def test_arabic_same_day(self):
        assert dates.calendar(MOMENT, REFERENCE, "ar") == "اليوم عند الساعة ١٤:٠٧"

    def test_format_overrides(self):
        assert dates.calendar(MOMENT, REFERENCE, "en", {"sameDay": "[Now]"}) == "Now"

    def test_aware_datetimes_are_compared_in_reference_zone(self):
        reference = datetime(2024, 3, 5, 10, 0, tzinfo=ZoneInfo("Asia/Riyadh"))
        moment = datetime(2024, 3, 5, 22, 0, tzinfo=timezone.utc)  # 01:00 next day in Riyadh
        assert dates.calendar_key(moment, reference) == "nextDay"

    def test_naive_moment_reads_as_reference_wall_time(self):
        reference = datetime(2024, 3, 5, 10, 0, tzinfo=ZoneInfo("Asia/Riyadh"))
        moment = datetime(2024, 3, 6, 9, 30)
        assert dates.calendar_key(moment, reference) == "nextDay"
        assert dates.calendar(moment, reference, "en") == "Tomorrow at 9:30 AM"

    def test_naive_reference_reads_as_moment_wall_time(self):
        moment = datetime(2024, 3, 5, 22, 0, tzinfo=timezone.utc)
        assert dates.calendar_key(moment, REFERENCE) == "sameDay"
        assert dates.calendar(moment, REFERENCE, "en") == "Today at 10:00 PM"


class TestHumanize:
    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=30), "a few seconds"),
        (timedelta(seconds=44), "a few seconds"),
        (timedelta(seconds=45), "a minute"),
        (timedelta(seconds=90), "2 minutes"),
        (timedelta(hours=3), "3 hours"),
        (timedelta(days=2), "2 days"),
        (timedelta(days=40), "a month"),
        (timedelta(days=400), "a year"),
        (timedelta(days=800), "2 years"),
    ])
    def test_english(self, delta, expected):
        assert dates.humanize(delta, "en") == expected

    def test_english_suffixes(self):
        assert dates.humanize(timedelta(hours=3), "en", with_suffix=True) == "in 3 hours"
        assert dates.humanize(timedelta(hours=-3), "en", with_suffix=True) == "3 hours ago"

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(hours=2), "ساعتان"),
        (timedelta(hours=5), "٥ ساعات"),
        (timedelta(seconds=10), "١٠ ثوان"),
        (timedelta(minutes=72), "ساعة واحدة"),
        (timedelta(days=11), "١١ يومًا"),
    ])
    def test_arabic(self, delta, expected):
        assert dates.humanize(delta, "ar") == expected

    def test_arabic_dual_with_suffix_uses_oblique_form(self):
        assert dates.humanize(timedelta(hours=2), "ar", with_suffix=True) == "بعد ساعتين"
        assert dates.humanize(timedelta(hours=-2), "ar", with_suffix=True) == "منذ ساعتين"


class TestTimezones:
    def test_format_timezone(self):
        assert dates.format_timezone("America/New_York") == ["America", "New York"]
        assert dates.format_timezone("Etc/UTC") == ["UTC"]

    def test_zone_without_prefix(self):
        assert dates.zone_without_prefix("Europe/London") == "London"
        assert dates.zone_without_prefix("Etc/UTC") == "UTC"

    def test_validity(self):
        assert dates.is_valid_timezone("Asia/Riyadh")
        assert not dates.is_valid_timezone("Mars/Olympus")
        assert "Asia/Riyadh" in dates.timezone_names()

    def test_get_zone_raises_for_unknown(self):
        with pytest.raises(UnknownTimezoneError):
            dates.get_zone("Nope/Zone")

    def test_is_equal_zones(self):
        at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert dates.is_equal_zones("Asia/Riyadh", "Asia/Baghdad", at=at)
        assert not dates.is_equal_zones("Asia/Riyadh", "Asia/Dubai", at=at)

    def test_display_name(self):
        assert dates.timezone_display_name("Asia/Riyadh", "ar") == "الرياض"
        assert dates.timezone_display_name("Asia/Tokyo", "ar") == "Tokyo"

    def test_format_with_zone(self):
        moment = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert dates.format_with_zone(moment, "Asia/Riyadh", "HH:mm", "en") == "15:00 (Riyadh)"
