"""Provider-facing approval request and result."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pg_gateway.models.enums import PaymentStatus


@dataclass
class ApprovalRequest:
    """Card authorization request handed to a provider adapter.

    ``card_number``, ``birth_date`` (YYYYMMDD), ``expiry`` (MMYY) and
    ``password`` (first two digits) are mandatory for the HTTP providers
    and ignored by the mock one.
    """

    partner_id: int
    amount: Decimal
    card_number: str | None = None
    birth_date: str | None = None
    expiry: str | None = None
    password: str | None = None
    card_bin: str | None = None
    card_last4: str | None = None
    product_name: str | None = None


@dataclass
class ApprovalResult:
    """Outcome of a successful provider authorization."""

    approval_code: str
    approved_at: datetime
    masked_card_last4: str | None = None
    status: PaymentStatus = PaymentStatus.APPROVED
