"""Display <-> minor unit conversion (CMDX <-> ucmdx) and odds scaling."""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from predictx.errors import ValidationError

MICRO = 1_000_000
ODDS_SCALE = 100

Number = int | float | str | Decimal


def _decimal(value: Number, what: str) -> Decimal:
    # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid {what}: {value!r}") from e
    if not d.is_finite():
        raise ValidationError(f"Invalid {what}: {value!r}")
    return d


def to_minor(amount: Number) -> int:
    """Display amount -> minor units: floor(amount * 1_000_000). Rejects negatives."""
    d = _decimal(amount, "amount")
    if d < 0:
        raise ValidationError(f"Amount must not be negative: {amount}")
    return int((d * MICRO).to_integral_value(rounding=ROUND_FLOOR))


def to_display(minor: int | str) -> Decimal:
    """Minor units -> display amount (exact)."""
    return Decimal(int(minor)) / MICRO


def format_amount(minor: int | str, denom: str = "CMDX", places: int = 2) -> str:
    """'1234500' -> '1.23 CMDX'."""
    q = Decimal(1).scaleb(-places)
    return f"{to_display(minor).quantize(q, rounding=ROUND_FLOOR):,} {denom}".strip()


def odds_to_contract(odds: Number) -> int:
    """Decimal odds -> contract integer (x100), rounded half up. Odds must exceed 1.00 after rounding."""
    d = _decimal(odds, "odds")
    scaled = int((d * ODDS_SCALE).to_integral_value(rounding=ROUND_HALF_UP))
    if scaled <= ODDS_SCALE:
        raise ValidationError(f"Odds must be greater than 1.00, got {odds}")
    return scaled


def odds_from_contract(scaled: int | str) -> Decimal:
    return Decimal(int(scaled)) / ODDS_SCALE


def round_odds(odds: Number) -> Decimal:
    """Decimal odds as the contract will see them, after x100 half-up rounding."""
    return odds_from_contract(odds_to_contract(odds))
