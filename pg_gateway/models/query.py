"""Query inputs and results for the payment ledger."""

from dataclasses import dataclass, field
from datetime import datetime

from pg_gateway.models.enums import PaymentStatus
from pg_gateway.models.payment import Payment, PaymentSummary

DEFAULT_PAGE_SIZE = 20


@dataclass
class QueryFilter:
    """Caller-facing query; ``cursor`` is the opaque token of a previous page."""

    partner_id: int | None = None
    status: PaymentStatus | str | None = None
    from_: datetime | None = None
    to: datetime | None = None
    cursor: str | None = None
    limit: int = DEFAULT_PAGE_SIZE


@dataclass
class SummaryFilter:
    """Filter predicate shared by page and summary queries."""

    partner_id: int | None = None
    status: PaymentStatus | None = None
    from_: datetime | None = None
    to: datetime | None = None


@dataclass
class PaymentQuery(SummaryFilter):
    """Store-level page query, sorted by ``(created_at, payment_id)`` descending."""

    limit: int = DEFAULT_PAGE_SIZE
    cursor_created_at: datetime | None = None
    cursor_id: int | None = None


@dataclass
class PaymentPage:
    """One page of payments plus the resume point for the next one."""

    items: list[Payment] = field(default_factory=list)
    has_next: bool = False
    next_cursor_created_at: datetime | None = None
    next_cursor_id: int | None = None


@dataclass
class QueryResult:
    """Page of payments, summary over the whole filtered set, and next cursor."""

    items: list[Payment]
    summary: PaymentSummary
    next_cursor: str | None
    has_next: bool
