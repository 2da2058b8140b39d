"""Fee and net amount calculation.

All arithmetic uses :class:`~decimal.Decimal`. The percentage component is
rounded ``ROUND_HALF_UP`` to whole currency units (``FEE_QUANTUM``) before the
fixed fee is added, so ``fee + net == amount`` holds exactly.
"""

from decimal import ROUND_HALF_UP, Decimal

FEE_QUANTUM = Decimal("1")

_ZERO = Decimal("0")
_ONE = Decimal("1")


def calculate_fee(
    amount: Decimal,
    rate: Decimal,
    fixed_fee: Decimal | None = None,
) -> tuple[Decimal, Decimal]:
    """Compute ``(fee, net)`` for a payment amount.

    Parameters
    ----------
    amount : Decimal
        Payment amount, must be non-negative.
    rate : Decimal
        Percentage rate in ``[0, 1]`` (``Decimal("0.0235")`` is 2.35%).
    fixed_fee : Decimal | None
        Absolute fee added after rounding the percentage part.

    Returns
    -------
    tuple[Decimal, Decimal]
        Fee and net amount.

    Raises
    ------
    ValueError
        If the amount is negative or the rate is outside ``[0, 1]``.
    """
    if not isinstance(amount, Decimal) or not isinstance(rate, Decimal):
        raise TypeError("amount and rate must be Decimal")
    if amount < _ZERO:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if rate < _ZERO or rate > _ONE:
        raise ValueError(f"rate must be within [0, 1], got {rate}")

    fee = (amount * rate).quantize(FEE_QUANTUM, rounding=ROUND_HALF_UP)
    if fixed_fee is not None:
        fee += fixed_fee
    return fee, amount - fee
