"""In-memory ledger store with referential integrity."""

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from pg_gateway.exceptions import ReferentialIntegrityError
from pg_gateway.models import (
    FeePolicy,
    Partner,
    Payment,
    PaymentPage,
    PaymentQuery,
    PaymentSummary,
    SummaryFilter,
)
from pg_gateway.store.base import LedgerRepository, select_effective_policy, truncate_to_millis


def _matches(payment: Payment, summary_filter: SummaryFilter) -> bool:
    if summary_filter.partner_id is not None and payment.partner_id != summary_filter.partner_id:
        return False
    if summary_filter.status is not None and payment.status != summary_filter.status:
        return False
    if summary_filter.from_ is not None and payment.created_at < summary_filter.from_:
        return False
    if summary_filter.to is not None and payment.created_at > summary_filter.to:
        return False
    return True


def _sort_key(payment: Payment) -> tuple[datetime, int]:
    return payment.created_at, payment.payment_id


@dataclass
class InMemoryLedgerStore(LedgerRepository):
    """Dict-backed store for tests, demos and the sample data script."""

    partners: dict[int, Partner] = field(default_factory=dict)
    payments: list[Payment] = field(default_factory=list)

    # Relationship indexes
    _partner_policies: dict[int, list[FeePolicy]] = field(default_factory=dict)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _next_payment_id: int = 1
    _next_policy_id: int = 1

    def add_partner(self, partner: Partner) -> None:
        """Add a partner to the store."""
        self.partners[partner.partner_id] = partner
        self._partner_policies.setdefault(partner.partner_id, [])

    def add_fee_policy(self, policy: FeePolicy) -> FeePolicy:
        """Add a fee policy version; assigns ``policy_id`` when missing."""
        if policy.partner_id not in self.partners:
            raise ReferentialIntegrityError(f"Partner {policy.partner_id} not found")

        with self._lock:
            if policy.policy_id is None:
                policy = replace(policy, policy_id=self._next_policy_id)
            self._next_policy_id = max(self._next_policy_id, policy.policy_id) + 1
            self._partner_policies[policy.partner_id].append(policy)
        return policy

    def get_partner_policies(self, partner_id: int) -> list[FeePolicy]:
        """Get all fee policy versions for a partner."""
        return list(self._partner_policies.get(partner_id, []))

    def find_partner(self, partner_id: int) -> Partner | None:
        return self.partners.get(partner_id)

    def find_effective_policy(self, partner_id: int, as_of: datetime) -> FeePolicy | None:
        return select_effective_policy(self.get_partner_policies(partner_id), as_of)

    def save_payment(self, payment: Payment) -> Payment:
        if payment.partner_id not in self.partners:
            raise ReferentialIntegrityError(f"Partner {payment.partner_id} not found")

        with self._lock:
            now = truncate_to_millis(datetime.now(timezone.utc))
            saved = replace(
                payment,
                payment_id=self._next_payment_id,
                created_at=truncate_to_millis(payment.created_at) if payment.created_at else now,
                updated_at=payment.updated_at or now,
            )
            self._next_payment_id += 1
            self.payments.append(saved)
        return saved

    def find_page(self, query: PaymentQuery) -> PaymentPage:
        rows = sorted(
            (p for p in self.payments if _matches(p, query)),
            key=_sort_key,
            reverse=True,
        )
        if query.cursor_created_at is not None and query.cursor_id is not None:
            cursor = (query.cursor_created_at, query.cursor_id)
            rows = [p for p in rows if _sort_key(p) < cursor]

        items = rows[: query.limit]
        has_next = len(rows) > query.limit
        last = items[-1] if has_next and items else None
        return PaymentPage(
            items=items,
            has_next=has_next,
            next_cursor_created_at=last.created_at if last else None,
            next_cursor_id=last.payment_id if last else None,
        )

    def summary(self, summary_filter: SummaryFilter) -> PaymentSummary:
        matched = [p for p in self.payments if _matches(p, summary_filter)]
        return PaymentSummary(
            count=len(matched),
            total_amount=sum((p.amount for p in matched), Decimal("0")),
            total_net_amount=sum((p.net_amount for p in matched), Decimal("0")),
        )
