"""Domain models for the payment gateway."""

from pg_gateway.models.approval import ApprovalRequest, ApprovalResult
from pg_gateway.models.enums import PaymentStatus
from pg_gateway.models.partner import FeePolicy, Partner
from pg_gateway.models.payment import Payment, PaymentCommand, PaymentSummary
from pg_gateway.models.query import (
    DEFAULT_PAGE_SIZE,
    PaymentPage,
    PaymentQuery,
    QueryFilter,
    QueryResult,
    SummaryFilter,
)

__all__ = [
    "ApprovalRequest",
    "ApprovalResult",
    "DEFAULT_PAGE_SIZE",
    "FeePolicy",
    "Partner",
    "Payment",
    "PaymentCommand",
    "PaymentPage",
    "PaymentQuery",
    "PaymentStatus",
    "PaymentSummary",
    "QueryFilter",
    "QueryResult",
    "SummaryFilter",
]
