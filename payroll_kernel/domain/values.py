"""
Values -- Rounding and formatting rules for payroll arithmetic.

Responsibility:
    Single home for the precision rules every calculator shares, so no
    component invents its own: monetary outputs carry 2 decimals, the
    canonical hourly rate carries 4, hour totals carry 2, and every
    rounding step is ROUND_HALF_UP.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are rejected at the boundary.
    - Deterministic formatting: the same Decimal always renders to the
      same text (used by the computation trail).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
CENTS = Decimal("0.01")
RATE_PRECISION = Decimal("0.0001")
HOURS_PRECISION = Decimal("0.01")
MINUTES_PER_HOUR = Decimal("60")

CURRENCY_SYMBOL = "₱"  # Philippine peso sign


def to_decimal(value: Decimal | int | str) -> Decimal:
    """Convert an int/str/Decimal to Decimal. Floats are rejected."""
    if isinstance(value, float):
        raise TypeError("Float amounts are not allowed, use Decimal or str")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(amount: Decimal) -> Decimal:
    """Round to centavos, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_rate(rate: Decimal) -> Decimal:
    """Round an intermediate rate to 4 decimals, half-up."""
    return rate.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    """Convert whole minutes to hours with 2 decimals."""
    return (Decimal(minutes) / MINUTES_PER_HOUR).quantize(
        HOURS_PRECISION, rounding=ROUND_HALF_UP
    )


def format_peso(amount: Decimal, places: int = 2) -> str:
    """Render an amount as e.g. ``₱22,000.00`` (or 4 places for rates)."""
    return f"{CURRENCY_SYMBOL}{amount:,.{places}f}"


def format_percent(rate: Decimal) -> str:
    """Render a fractional rate as a percentage without trailing zeros.

    ``Decimal("0.045")`` -> ``"4.5%"``, ``Decimal("0.02")`` -> ``"2%"``.
    """
    pct = (rate * 100).normalize()
    text = f"{pct:f}"
    return f"{text}%"
