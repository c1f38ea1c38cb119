"""Significant-figure truncation."""

import math
from decimal import ROUND_DOWN, Decimal

from perfreporter.core.exceptions import InvalidInputError


def truncate_to_sig_figs(value: float, sig_figs: int) -> float:
    """Truncate ``value`` toward zero, keeping ``sig_figs`` significant digits.

    The value is converted through its shortest decimal representation, so
    binary artifacts such as ``0.29 * 100 == 28.999...`` do not drop a digit.

    Examples:
        >>> truncate_to_sig_figs(10.5, 2)
        10.0
        >>> truncate_to_sig_figs(-0.01239, 3)
        -0.0123

    Args:
        value: Number to truncate. Zero, NaN and infinities pass through.
        sig_figs: Number of significant digits to keep (at least 1).

    Raises:
        InvalidInputError: If ``sig_figs`` is less than 1.
    """
    if sig_figs < 1:
        raise InvalidInputError(f"sig_figs must be at least 1, got {sig_figs}")
    if value == 0 or not math.isfinite(value):
        return value

    d = Decimal(repr(value))
    if len(d.as_tuple().digits) <= sig_figs:
        return value
    quantum = Decimal(1).scaleb(d.adjusted() - sig_figs + 1)
    return float(d.quantize(quantum, rounding=ROUND_DOWN))
