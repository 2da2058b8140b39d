"""Persistence contract used by the payment services."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from pg_gateway.models import (
    FeePolicy,
    Partner,
    Payment,
    PaymentPage,
    PaymentQuery,
    PaymentSummary,
    SummaryFilter,
)


def select_effective_policy(policies: Iterable[FeePolicy], as_of: datetime) -> FeePolicy | None:
    """Pick the version with the greatest ``effective_from <= as_of``."""
    effective = None
    for policy in policies:
        if policy.effective_from > as_of:
            continue
        if effective is None or policy.effective_from > effective.effective_from:
            effective = policy
    return effective


class LedgerRepository(ABC):
    """Partners, fee policies and the append-only payment ledger."""

    @abstractmethod
    def find_partner(self, partner_id: int) -> Partner | None:
        ...

    @abstractmethod
    def find_effective_policy(self, partner_id: int, as_of: datetime) -> FeePolicy | None:
        ...

    @abstractmethod
    def save_payment(self, payment: Payment) -> Payment:
        """Persist atomically and return a copy with id and timestamps assigned."""
        ...

    @abstractmethod
    def find_page(self, query: PaymentQuery) -> PaymentPage:
        ...

    @abstractmethod
    def summary(self, summary_filter: SummaryFilter) -> PaymentSummary:
        ...


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision so stored timestamps round-trip through cursors."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)
