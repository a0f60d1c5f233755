from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Upper bound (exclusive) for any single price the API accepts
MAX_AMOUNT = Decimal("100000000")


def to_decimal(value) -> Decimal:
    """Coerce a DB aggregate (None, int, float or Decimal) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_positive(value) -> Decimal | None:
    """Return value as a positive Decimal, or None when it is missing or not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite() or parsed <= 0:
        return None
    return parsed


def percentage(part, whole) -> Decimal:
    # Zero whole -> 0, never NaN or Infinity
    whole = to_decimal(whole)
    if whole == 0:
        return ZERO
    return (to_decimal(part) / whole * 100).quantize(CENT, rounding=ROUND_HALF_UP)
