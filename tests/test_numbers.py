"""
Tests for number and byte-size formatting.
"""
import pytest

from tarjama.core.i18n import I18N
from tarjama.core.numbers import to_human_size, to_number


def _label(unit, size):
    return "Bytes" if unit is None else unit.upper()


class TestToNumber:
    @pytest.mark.parametrize("number,options,expected", [
        (1234567.891, {}, "1,234,567.891"),
        (1234.5, {"precision": 2}, "1,234.50"),
        (1234.5, {"precision": 0}, "1,235"),
        (999, {"precision": 0}, "999"),
        (-1234.5, {"precision": 1}, "-1,234.5"),
        (1234.5, {"precision": 1, "separator": ",", "delimiter": "."}, "1.234,5"),
        (12.5, {"strip_insignificant_zeros": True}, "12.5"),
        (12, {"precision": 2, "strip_insignificant_zeros": True}, "12"),
        (100, {"precision": 2, "strip_insignificant_zeros": True}, "100"),
    ])
    def test_formatting(self, number, options, expected):
        assert to_number(number, **options) == expected

    def test_rounds_half_up(self):
        assert to_number(0.125, precision=2) == "0.13"

    def test_negative_zero_has_no_sign(self):
        assert to_number(-0.0001, precision=2) == "0.00"


class TestToHumanSize:
    @pytest.mark.parametrize("number,expected", [
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 ** 3, "5 GB"),
        (1024 ** 5, "1024 TB"),
    ])
    def test_units(self, number, expected):
        assert to_human_size(number, _label) == expected

    def test_custom_format(self):
        assert to_human_size(2048, _label, fmt="%u:%n") == "KB:2"


class TestLocalizedNumbers:
    def test_to_number_uses_locale_format(self, i18n):
        I18N.register("de", {"js": {"number": {"format": {"separator": ",", "delimiter": "."}}}})
        assert I18N.to_number(1234.5, locale="en") == "1,234.500"
        assert I18N.to_number(1234.5, locale="de", precision=1) == "1.234,5"

    def test_to_human_size_pluralizes_bytes(self, i18n):
        assert I18N.to_human_size(1, locale="en") == "1 Byte"
        assert I18N.to_human_size(2, locale="en") == "2 Bytes"
        assert I18N.to_human_size(2048, locale="en") == "2 KB"

    def test_to_human_size_arabic(self, packaged):
        assert I18N.to_human_size(3, locale="ar") == "3 بايت"
        assert I18N.to_human_size(1536, locale="ar") == "1.5 ك.بايت"
