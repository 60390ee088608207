"""Parsing of primitive skin values (colors and numbers)."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

_HEX_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class ColorParseError(ValueError):
    """Raised when a color string cannot be parsed."""


class NumberParseError(ValueError):
    """Raised when a numeric string cannot be parsed."""


@dataclass(frozen=True, slots=True)
class Color:
    """An 8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(r, g, b, 255)

    @property
    def is_transparent(self) -> bool:
        return self.a == 0

    def hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


TRANSPARENT = Color(0, 0, 0, 0)
WHITE = Color(255, 255, 255, 255)


def parse_color(value: str) -> Color:
    """Parse `transparent`, `#RRGGBB`, `#RRGGBBAA`, `rgb(...)` or `rgba(...)`."""
    text = value.strip()
    if text.lower() == "transparent":
        return TRANSPARENT
    if text.startswith("#"):
        return _parse_hex(text[1:])
    if text.startswith("rgba("):
        return _parse_rgba(text[len("rgba("):].rstrip(")"))
    if text.startswith("rgb("):
        r, g, b = _parse_rgb_components(text[len("rgb("):].rstrip(")"))
        return Color(r, g, b, 255)
    raise ColorParseError(f"Unsupported color format: {text}")


def parse_number(value: str) -> float:
    """Parse a plain decimal float such as `12`, `-2.5` or `1e3`; non-finite values are rejected."""
    text = value.strip()
    try:
        number = _to_float(text)
    except ValueError as exc:
        raise NumberParseError(f"Invalid number: {text}") from exc
    if not math.isfinite(number):
        raise NumberParseError(f"Number is not finite: {text}")
    return number


def _parse_hex(digits: str) -> Color:
    digits = digits.strip()
    if not _HEX_COLOR_RE.match(digits):
        raise ColorParseError(f"Invalid hex color: #{digits}")
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return Color(r, g, b, a)


def _parse_rgba(body: str) -> Color:
    parts = [part.strip() for part in body.split(",")]
    if len(parts) != 4:
        raise ColorParseError("rgba expects 4 components")
    r, g, b = _parse_rgb_components(",".join(parts[:3]))
    return Color(r, g, b, _parse_alpha(parts[3]))


def _parse_rgb_components(body: str) -> tuple[int, int, int]:
    parts = [part.strip() for part in body.split(",")]
    if len(parts) != 3:
        raise ColorParseError("rgb expects 3 components")
    return (
        _parse_channel(parts[0]),
        _parse_channel(parts[1]),
        _parse_channel(parts[2]),
    )


def _parse_channel(text: str) -> int:
    try:
        value = _to_float(text)
    except ValueError as exc:
        raise ColorParseError(f"Invalid color channel: {text}") from exc
    if not 0.0 <= value <= 255.0:
        raise ColorParseError(f"Color channel out of range: {text}")
    return _round_half_up(value)


def _parse_alpha(text: str) -> int:
    if "." not in text:
        return _parse_channel(text)
    try:
        value = _to_float(text)
    except ValueError as exc:
        raise ColorParseError(f"Invalid alpha: {text}") from exc
    if not 0.0 <= value <= 1.0:
        raise ColorParseError(f"Alpha out of range: {text}")
    return _round_half_up(value * 255.0)


def _to_float(text: str) -> float:
    """`float()` restricted to ASCII decimal notation (no `_` separators, no inf/nan words)."""
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
