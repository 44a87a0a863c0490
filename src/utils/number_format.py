"""
Display number parsing & formatting
-----------------------------------

Counters and live values on the dashboard are plain text ("1,250+", "5cm",
"0.78", "24.5"). Animating or refreshing them means reading a number back
out of that text and writing a new number with the same decorations.

parse_display_value("12,500+")  -> ParsedDisplay(value=12500.0, fmt=DisplayFormat(suffix="+", thousands_sep=","))
fmt.format(9000.4)              -> "9,000+"

Separator rules:
- ``,`` followed by groups of exactly three digits is a thousands separator,
  otherwise it is a decimal comma ("0,78").
- ``.`` is the decimal point when it appears once; several ``.`` in a
  three-digit grouping pattern ("1.234.567") are thousands separators.
- When both appear, the last one is the decimal separator.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional

_DISPLAY_RE = re.compile(
    r"^(?P<prefix>\+?)\s*(?P<number>-?\d[\d.,]*)(?P<suffix>\D*)$"
)


def _quantize(value: float, decimals: int) -> Decimal:
    exact = Decimal(repr(float(value)))
    quantum = Decimal(1).scaleb(-decimals)
    # the default 28-digit context cannot hold 1e30 at two decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + decimals + 2)
        return exact.quantize(quantum, rounding=ROUND_HALF_UP)


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round like the browser's Math.round / toFixed (halves away from zero)."""
    return float(_quantize(value, decimals))


def fit_to_domain(value: float, low: float, high: float, decimals: int) -> float:
    """
    Round value to ``decimals`` places without leaving [low, high].

    Rounding 0.996 to two places gives 1.0, which would escape a domain
    ending at 0.995; such values are pulled back to the last representable
    step inside the domain.
    """
    scale = 10 ** decimals
    shown = round_half_up(clamp(value, low, high), decimals)
    if shown > high:
        shown = math.floor(high * scale) / scale
    if shown < low:
        shown = math.ceil(low * scale) / scale
    return shown


@dataclass(frozen=True)
class DisplayFormat:
    """Decorations and precision of a displayed number."""
    decimals: int = 0
    prefix: str = ""
    suffix: str = ""
    thousands_sep: Optional[str] = None
    decimal_sep: str = "."

    def with_decimals(self, decimals: int) -> "DisplayFormat":
        return replace(self, decimals=decimals)

    def format(self, value: float) -> str:
        """Round half-up to ``decimals`` and re-apply the decorations."""
        q = _quantize(value, self.decimals)
        if q == 0:
            q = abs(q)  # no "-0"

        sign = "-" if q < 0 else ""
        int_part, _, frac = f"{abs(q):.{self.decimals}f}".partition(".")

        if self.thousands_sep:
            int_part = f"{int(int_part):,}".replace(",", self.thousands_sep)

        number = sign + int_part
        if frac:
            number += self.decimal_sep + frac

        return f"{self.prefix}{number}{self.suffix}"


@dataclass(frozen=True)
class ParsedDisplay:
    """A number read out of display text, plus how to write it back."""
    value: float
    fmt: DisplayFormat


def _is_grouped(number: str, sep: str) -> bool:
    digits = number.lstrip("-")
    return re.fullmatch(r"\d{1,3}(" + re.escape(sep) + r"\d{3})+", digits) is not None


def _split_separators(number: str):
    """Return (thousands_sep, decimal_sep) for a raw number string, or None."""
    has_comma = "," in number
    has_dot = "." in number

    if has_comma and has_dot:
        decimal_sep = "," if number.rfind(",") > number.rfind(".") else "."
        thousands_sep = "." if decimal_sep == "," else ","
        integer = number.rsplit(decimal_sep, 1)[0]
        if number.count(decimal_sep) != 1 or not _is_grouped(integer, thousands_sep):
            return None
        return thousands_sep, decimal_sep

    if has_comma:
        if _is_grouped(number, ","):
            return ",", "."
        if number.count(",") == 1:
            return None, ","
        return None

    if has_dot:
        if number.count(".") == 1:
            return None, "."
        if _is_grouped(number, "."):
            return ".", ","
        return None

    return None, "."


def parse_display_value(text: Optional[str]) -> Optional[ParsedDisplay]:
    """
    Parse a displayed number, stripping known decorations.

    Returns None when the text is not a decorated number ("N/A", "", "5-16").
    """
    if text is None:
        return None

    match = _DISPLAY_RE.match(text.strip())
    if match is None:
        return None

    number = match.group("number")
    suffix = match.group("suffix")
    if number.endswith((",", ".")):
        return None

    separators = _split_separators(number)
    if separators is None:
        return None
    thousands_sep, decimal_sep = separators

    normalized = number
    if thousands_sep:
        normalized = normalized.replace(thousands_sep, "")
    decimals = 0
    if decimal_sep in normalized:
        decimals = len(normalized.rsplit(decimal_sep, 1)[1])
        normalized = normalized.replace(decimal_sep, ".")

    try:
        value = float(normalized)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None

    fmt = DisplayFormat(
        decimals=decimals,
        prefix=match.group("prefix"),
        suffix=suffix,
        thousands_sep=thousands_sep,
        decimal_sep=decimal_sep,
    )
    return ParsedDisplay(value=value, fmt=fmt)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
