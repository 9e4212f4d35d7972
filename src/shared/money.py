"""Money helpers: Decimal coercion, cent rounding and rupee display formatting."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shared.errors import InvalidArgument

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value) -> Decimal:
    """Coerce an int, float, str or Decimal amount into a Decimal."""
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so that floats keep their shortest repr instead of binary noise
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgument(f"Invalid monetary amount: {value!r}") from exc


def round_to_cents(amount: Decimal) -> Decimal:
    return to_money(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_inr(amount) -> str:
    """Format an amount the way the storefront displays prices, e.g. ``₹1,23,456.5``.

    Uses Indian digit grouping (thousands, then pairs) and at most three
    fraction digits with trailing zeros dropped.
    """
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    value = abs(value).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)

    integer, _, fraction = format(value, "f").partition(".")
    fraction = fraction.rstrip("0")

    if len(integer) > 3:
        head, tail = integer[:-3], integer[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integer = ",".join([*groups, tail])

    return f"₹{sign}{integer}" + (f".{fraction}" if fraction else "")
