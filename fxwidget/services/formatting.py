"""Display formatting helpers.

Presentation only: values are formatted when rendered, never rounded when
stored or computed. Defaults follow pt-BR conventions (1.234,56).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, localcontext

UNAVAILABLE_DISPLAY = "---"


def format_number(
    value: float,
    *,
    min_digits: int = 2,
    max_digits: int = 4,
    decimal_sep: str = ",",
    group_sep: str = ".",
) -> str:
    exact = Decimal(str(value))
    with localcontext() as ctx:
        # Enough digits for the integer part plus the requested fraction
        ctx.prec = max(28, exact.adjusted() + max_digits + 2)
        quantized = exact.quantize(Decimal(1).scaleb(-max_digits), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    integer, _, fraction = f"{abs(quantized):f}".partition(".")
    fraction = fraction.rstrip("0").ljust(min_digits, "0")

    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)
    text = group_sep.join(groups)
    if fraction:
        text = f"{text}{decimal_sep}{fraction}"
    return sign + text


def format_amount(value: float, decimal_sep: str = ",", group_sep: str = ".") -> str:
    return format_number(
        value, min_digits=2, max_digits=4, decimal_sep=decimal_sep, group_sep=group_sep
    )


def format_rate(value: float, decimal_sep: str = ",", group_sep: str = ".") -> str:
    return format_number(
        value, min_digits=2, max_digits=6, decimal_sep=decimal_sep, group_sep=group_sep
    )


def invalid_amount_display(decimal_sep: str = ",") -> str:
    return f"0{decimal_sep}00"
