"""Tests for simulation/complex_value.py — value parsing and formatting."""

import math

import pytest
from simulation.complex_value import (
    NAN,
    UNAVAILABLE,
    conjugate,
    divide,
    format_complex,
    format_number,
    is_finite,
    looks_complex,
    magnitude,
    parse_complex,
    parse_real,
    phase_degrees,
)


def _is_nan(value: complex) -> bool:
    return math.isnan(value.real) and math.isnan(value.imag)


class TestParseReal:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1", 1.0),
            ("-4.7", -4.7),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("2.5E-3", 2.5e-3),
            ("1k", 1e3),
            ("1K", 1e3),
            ("2.2n", 2.2e-9),
            ("10p", 10e-12),
            ("4.7u", 4.7e-6),
            ("1m", 1e-3),
            ("1meg", 1e6),
            ("1MEG", 1e6),
            ("10M", 1e7),
            ("3g", 3e9),
            (" 1 k ", 1e3),
        ],
    )
    def test_values(self, text, expected):
        assert parse_real(text) == pytest.approx(expected)

    def test_lowercase_m_is_milli(self):
        assert parse_real("5m") == pytest.approx(5e-3)

    @pytest.mark.parametrize("text", ["", "abc", "1x", "k", "1kk", "1.2.3", None])
    def test_invalid_is_nan(self, text):
        assert math.isnan(parse_real(text))


class TestParseComplex:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("5", complex(5, 0)),
            ("1k", complex(1000, 0)),
            ("100+50j", complex(100, 50)),
            ("100-50i", complex(100, -50)),
            ("-2j", complex(0, -2)),
            ("3.3ki", complex(0, 3300)),
            ("j", complex(0, 1)),
            ("+i", complex(0, 1)),
            ("-j", complex(0, -1)),
            ("5+j", complex(5, 1)),
            ("5-j", complex(5, -1)),
            ("1e-3+2j", complex(1e-3, 2)),
            ("1e-3j", complex(0, 1e-3)),
            ("1k+1kj", complex(1000, 1000)),
            (" 10 + 20 j ", complex(10, 20)),
        ],
    )
    def test_values(self, text, expected):
        value = parse_complex(text)
        assert value.real == pytest.approx(expected.real)
        assert value.imag == pytest.approx(expected.imag)

    @pytest.mark.parametrize("text", ["", "abc", "1j2", "1+2j+3j", "jj", "1+xj"])
    def test_invalid_is_nan(self, text):
        assert _is_nan(parse_complex(text))

    def test_never_raises_on_non_string(self):
        assert parse_complex(42) == complex(42, 0)
        assert _is_nan(parse_complex(None))


class TestLooksComplex:
    def test_markers(self):
        assert looks_complex("2j")
        assert looks_complex("2i")
        assert looks_complex("1+2J")
        assert not looks_complex("1u")
        assert not looks_complex("1meg")


class TestArithmetic:
    def test_divide(self):
        assert divide(complex(4, 2), complex(2, 0)) == complex(2, 1)

    def test_divide_by_zero_is_nan(self):
        assert _is_nan(divide(complex(1, 0), complex(0, 0)))

    def test_conjugate_and_magnitude(self):
        assert conjugate(complex(3, 4)) == complex(3, -4)
        assert magnitude(complex(3, 4)) == pytest.approx(5.0)

    def test_phase(self):
        assert phase_degrees(complex(0, -1)) == pytest.approx(-90.0)

    def test_is_finite(self):
        assert is_finite(complex(1, 2))
        assert not is_finite(NAN)
        assert not is_finite(complex(math.inf, 0))


class TestFormatting:
    def test_real_only(self):
        assert format_complex(complex(2.5, 0)) == "2.5"

    def test_integer_value(self):
        assert format_complex(complex(1000, 0)) == "1000"

    def test_pure_imaginary(self):
        assert format_complex(complex(0, -159.15494309189535)) == "-159.154943i"

    def test_rectangular(self):
        assert format_complex(complex(3, -4)) == "3-4i"
        assert format_complex(complex(3, 4)) == "3+4i"

    def test_near_zero_parts_suppressed(self):
        assert format_complex(complex(2.0, 1e-15)) == "2"
        assert format_complex(complex(1e-15, 2.0)) == "2i"
        assert format_complex(complex(0, 0)) == "0"

    def test_rounds_to_six_digits(self):
        assert format_complex(complex(2.4999999999999996, 0)) == "2.5"

    def test_non_finite_is_unavailable(self):
        assert format_complex(NAN) == UNAVAILABLE
        assert format_number(math.inf) == UNAVAILABLE

    def test_format_number(self):
        assert format_number(0.0025) == "0.0025"
        assert format_number(-0.0) == "0"
        assert format_number(1e-9) == "0"
