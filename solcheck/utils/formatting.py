"""Display helpers for amounts shown on result cards."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

# smallest first: a value that rounds up to 1000 of one unit moves to the next
_SUFFIXES = (
    (Decimal("1e3"), "K"),
    (Decimal("1e6"), "M"),
    (Decimal("1e9"), "B"),
)
_ONE_DECIMAL = Decimal("0.1")
_THOUSAND = Decimal(1000)


def _to_decimal(value: object) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)
    return result if result.is_finite() else Decimal(0)


def _round(value: Decimal, exp: Decimal) -> Decimal:
    """Half-up quantize with enough precision for any magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exp.adjusted() + 2)
        return value.quantize(exp, rounding=ROUND_HALF_UP)


def format_number(value: object) -> str:
    """Abbreviate a magnitude: 1500 → "1.5K", 2500000 → "2.5M", 999 → "999".

    One decimal, half-up rounding. The suffix is picked after rounding, so
    999.7 → "1.0K" and 999950 → "1.0M". Below 1000 the value is rounded to
    an integer and digit-grouped.
    """
    number = _to_decimal(value)
    whole = _round(number, Decimal(1))
    if abs(whole) < _THOUSAND:
        return f"{int(whole):,}"

    for threshold, suffix in _SUFFIXES[:-1]:
        scaled = _round(number / threshold, _ONE_DECIMAL)
        if abs(scaled) < _THOUSAND:
            return f"{scaled}{suffix}"
    threshold, suffix = _SUFFIXES[-1]
    return f"{_round(number / threshold, _ONE_DECIMAL)}{suffix}"


def format_usd(value: object) -> str:
    return f"${format_number(value)}"


def format_sol(value: object) -> str:
    number = _round(_to_decimal(value), Decimal("0.0001"))
    return f"{number:,.4f} SOL"
