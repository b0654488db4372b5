"""
simulation/complex_value.py

Parses element value strings into complex numbers and formats complex
results for display.

Values use SI magnitude suffixes and an optional rectangular complex form:
    "1k" -> 1000, "2.2n" -> 2.2e-9, "1meg" -> 1e6, "10M" -> 1e7
    "100+50j" -> 100+50j, "-2j" -> -2j, "3.3ki" -> 3300j

Parse failures produce a NaN sentinel instead of raising, so a bad value
surfaces later as a singular or non-finite solve that names the element
in the derivation trace.
"""

import cmath
import math
import re

NAN = complex(math.nan, math.nan)

# Display threshold below which a real or imaginary part is hidden
DISPLAY_ZERO = 1e-12

UNAVAILABLE = "—"

# Bare lowercase 'm' is always milli. Only 'meg' (any case) or an uppercase
# 'M' means mega, and 'g'/'G' means giga.
SI_SUFFIX_MULTIPLIERS = {
    "p": 1e-12,
    "P": 1e-12,
    "n": 1e-9,
    "N": 1e-9,
    "u": 1e-6,
    "U": 1e-6,
    "m": 1e-3,
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "meg": 1e6,
    "g": 1e9,
    "G": 1e9,
}

_REAL_RE = re.compile(
    r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)((?i:meg)|[pPnNuUmkKMgG])?$"
)

_IMAG_MARKERS = re.compile(r"[ijIJ]")


def parse_real(raw) -> float:
    """
    Parse a real number with an optional SI suffix.

    Returns NaN when the text does not match the grammar.
    """
    text = re.sub(r"\s+", "", str(raw if raw is not None else ""))
    if not text:
        return math.nan

    match = _REAL_RE.match(text)
    if not match:
        return math.nan

    num_str, suffix = match.groups()
    value = float(num_str)
    if suffix:
        key = "meg" if suffix.lower() == "meg" else suffix
        value *= SI_SUFFIX_MULTIPLIERS[key]
    return value


def looks_complex(raw) -> bool:
    """True when the text carries an imaginary marker ('i' or 'j')."""
    return bool(_IMAG_MARKERS.search(str(raw if raw is not None else "")))


def _split_sign_index(text: str) -> int:
    """Index of the +/- separating real and imaginary parts, or -1.

    Signs at position 0 and exponent signs (right after 'e'/'E') are skipped.
    """
    for idx in range(len(text) - 1, 0, -1):
        if text[idx] in "+-" and text[idx - 1] not in "eE":
            return idx
    return -1


def parse_complex(raw) -> complex:
    """
    Parse a real, pure-imaginary or rectangular complex value.

    Returns NAN (NaN+NaNj) when the text does not match the grammar.
    """
    text = re.sub(r"\s+", "", str(raw if raw is not None else ""))
    if not text:
        return NAN

    text = _IMAG_MARKERS.sub("i", text)

    if "i" not in text:
        real = parse_real(text)
        return NAN if math.isnan(real) else complex(real, 0.0)

    if text in ("i", "+i"):
        return complex(0.0, 1.0)
    if text == "-i":
        return complex(0.0, -1.0)

    if not text.endswith("i") or text.count("i") != 1:
        return NAN
    body = text[:-1]

    split = _split_sign_index(body)
    if split > 0:
        real = parse_real(body[:split])
        imag_text = body[split + 1:]
        imag = parse_real(imag_text) if imag_text else 1.0
        if math.isnan(real) or math.isnan(imag):
            return NAN
        if body[split] == "-":
            imag = -imag
        return complex(real, imag)

    # Pure imaginary, e.g. "2i", "-4.7ki"
    if body in ("+", "-"):
        return complex(0.0, 1.0 if body == "+" else -1.0)
    imag = parse_real(body)
    return NAN if math.isnan(imag) else complex(0.0, imag)


# --- Arithmetic -------------------------------------------------------------


def divide(a: complex, b: complex) -> complex:
    """a / b, with NaN+NaNj for a zero divisor instead of an exception."""
    if b == 0:
        return NAN
    return a / b


def conjugate(a: complex) -> complex:
    return a.conjugate()


def magnitude(a: complex) -> float:
    return math.hypot(a.real, a.imag)


def phase_degrees(a: complex) -> float:
    return math.degrees(cmath.phase(a))


def is_finite(a: complex) -> bool:
    return cmath.isfinite(a)


# --- Formatting -------------------------------------------------------------


def format_number(value: float, digits: int = 6) -> str:
    """Round to a fixed number of decimals and render without trailing zeros."""
    if not math.isfinite(value):
        return UNAVAILABLE
    rounded = round(value, digits)
    if rounded == 0:
        return "0"
    if rounded == int(rounded) and abs(rounded) < 1e15:
        return str(int(rounded))
    return repr(rounded)


def format_complex(value: complex, digits: int = 6) -> str:
    """
    Render a complex value for display.

    Near-zero parts are suppressed so purely real or purely imaginary
    values read cleanly; non-finite values render as an unavailable marker.
    """
    if not is_finite(value):
        return UNAVAILABLE
    re_part = round(value.real, digits)
    im_part = round(value.imag, digits)
    if abs(im_part) < DISPLAY_ZERO:
        return format_number(re_part, digits)
    if abs(re_part) < DISPLAY_ZERO:
        return f"{format_number(im_part, digits)}i"
    sign = "+" if im_part >= 0 else ""
    return f"{format_number(re_part, digits)}{sign}{format_number(im_part, digits)}i"


def to_pair(value: complex) -> dict:
    """Serialize a complex value as {"re": ..., "im": ...}."""
    return {"re": value.real, "im": value.imag}
