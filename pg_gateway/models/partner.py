"""Partner and fee policy models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Partner:
    """Merchant on whose behalf payments are authorized."""

    partner_id: int
    code: str
    name: str
    active: bool = True


@dataclass
class FeePolicy:
    """Versioned fee rule for a partner.

    A policy applies from ``effective_from`` (UTC) until a newer version
    for the same partner takes over. ``percentage`` is a rate such as
    ``Decimal("0.0235")`` and ``fixed_fee`` an absolute amount added on top.
    """

    partner_id: int
    effective_from: datetime
    percentage: Decimal
    fixed_fee: Decimal | None = None
    policy_id: int | None = None
