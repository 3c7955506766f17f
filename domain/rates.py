from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Tuple, Union

_NON_DIGITS = re.compile(r"[^0-9]")
_CENTS = Decimal("0.01")

# keystrokes beyond this are ignored (max 9.999.999.999.999,99)
MAX_RATE_DIGITS = 15

Number = Union[int, float, Decimal]


def parse_digits_to_rate(raw: Optional[str]) -> float:
    """Convert keypad-style input into a rate.

    Every non-digit character is dropped and the remaining digits are read
    as hundredths of a percent:

    - "547" -> 5.47
    - "5,47" -> 5.47
    - "" / "abc" / None -> 0.0

    Leading zeros are dropped and only the first ``MAX_RATE_DIGITS``
    significant digits are kept, so the value is always finite.
    """
    digits = _NON_DIGITS.sub("", raw or "").lstrip("0")[:MAX_RATE_DIGITS]
    if not digits:
        return 0.0
    return float(Decimal(digits).scaleb(-2))


def format_rate(value: Number) -> str:
    """Render a rate in pt-BR fixed point: "1.234,50". Non-finite -> "N/A"."""
    amount = Decimal(str(value))
    if not amount.is_finite():
        return "N/A"
    with localcontext() as ctx:
        # room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    text = f"{amount:,.2f}"
    # en-US "1,234.50" -> pt-BR "1.234,50"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_percent(value: Number) -> str:
    return f"{format_rate(value)}%"


def normalize_keystrokes(raw: Optional[str]) -> Tuple[float, str]:
    value = parse_digits_to_rate(raw)
    return value, format_rate(value)
