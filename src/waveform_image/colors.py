"""RGBA color values and ``RRGGBBAA`` hex conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_COLOR_RE = re.compile(r"#?([0-9a-fA-F]{8})")


@dataclass(frozen=True)
class Rgba:
    """One 8-bit-per-channel RGBA color."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} component out of range: {value}")

    def to_bytes(self) -> bytes:
        return bytes((self.red, self.green, self.blue, self.alpha))

    def to_hex(self) -> str:
        """Return the upper-case ``RRGGBBAA`` form."""
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}{self.alpha:02X}"


BLACK = Rgba(0, 0, 0, 255)
WHITE = Rgba(255, 255, 255, 255)


def parse_hex_color(text: str) -> Rgba:
    """Parse an ``RRGGBBAA`` hex string (case-insensitive, optional ``#``).

    Anything other than exactly eight hex digits raises ``ValueError``.
    """
    match = _HEX_COLOR_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"expected RRGGBBAA hex color, got {text!r}")
    digits = match.group(1)
    return Rgba(
        red=int(digits[0:2], 16),
        green=int(digits[2:4], 16),
        blue=int(digits[4:6], 16),
        alpha=int(digits[6:8], 16),
    )
