"""Payment ledger models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pg_gateway.models.enums import PaymentStatus


@dataclass
class PaymentCommand:
    """Input of the create-payment operation."""

    partner_id: int
    amount: Decimal
    card_number: str | None = None  # hyphens allowed
    birth_date: str | None = None  # YYYYMMDD
    expiry: str | None = None  # MMYY
    password: str | None = None  # first two digits
    card_bin: str | None = None
    card_last4: str | None = None
    product_name: str | None = None


@dataclass
class Payment:
    """Ledger record of an authorized payment.

    ``payment_id``, ``created_at`` and ``updated_at`` are assigned by the
    store on save. ``fee_amount + net_amount == amount`` always holds.
    """

    partner_id: int
    amount: Decimal
    applied_fee_rate: Decimal
    fee_amount: Decimal
    net_amount: Decimal
    approval_code: str
    approved_at: datetime
    status: PaymentStatus
    card_bin: str | None = None
    card_last4: str | None = None
    payment_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class PaymentSummary:
    """Aggregate over every payment matching a filter."""

    count: int = 0
    total_amount: Decimal = Decimal("0")
    total_net_amount: Decimal = Decimal("0")
