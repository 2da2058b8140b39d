"""PostgreSQL ledger store (psycopg 3)."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import psycopg
from psycopg import errors
from psycopg.rows import dict_row

from pg_gateway.exceptions import ReferentialIntegrityError
from pg_gateway.models import (
    FeePolicy,
    Partner,
    Payment,
    PaymentPage,
    PaymentQuery,
    PaymentStatus,
    PaymentSummary,
    SummaryFilter,
)
from pg_gateway.store.base import LedgerRepository

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS partner (
    id          BIGINT PRIMARY KEY,
    code        VARCHAR(64) NOT NULL UNIQUE,
    name        VARCHAR(255) NOT NULL,
    active      BOOLEAN NOT NULL DEFAULT TRUE
);

CREATE TABLE IF NOT EXISTS partner_fee_policy (
    id              BIGSERIAL PRIMARY KEY,
    partner_id      BIGINT NOT NULL REFERENCES partner (id),
    effective_from  TIMESTAMPTZ NOT NULL,
    percentage      NUMERIC(10, 6) NOT NULL,
    fixed_fee       NUMERIC(15, 0)
);

CREATE INDEX IF NOT EXISTS idx_fee_policy_partner_effective
    ON partner_fee_policy (partner_id, effective_from DESC);

CREATE TABLE IF NOT EXISTS payment (
    id                BIGSERIAL PRIMARY KEY,
    partner_id        BIGINT NOT NULL REFERENCES partner (id),
    amount            NUMERIC(15, 0) NOT NULL,
    applied_fee_rate  NUMERIC(10, 6) NOT NULL,
    fee_amount        NUMERIC(15, 0) NOT NULL,
    net_amount        NUMERIC(15, 0) NOT NULL,
    card_bin          VARCHAR(8),
    card_last4        VARCHAR(4),
    approval_code     VARCHAR(64) NOT NULL,
    approved_at       TIMESTAMPTZ NOT NULL,
    status            VARCHAR(20) NOT NULL,
    created_at        TIMESTAMPTZ NOT NULL DEFAULT date_trunc('milliseconds', now()),
    updated_at        TIMESTAMPTZ NOT NULL DEFAULT date_trunc('milliseconds', now())
);

CREATE INDEX IF NOT EXISTS idx_payment_created
    ON payment (created_at DESC, id DESC);
CREATE INDEX IF NOT EXISTS idx_payment_partner_created
    ON payment (partner_id, created_at DESC, id DESC);
"""

PAYMENT_COLUMNS = (
    "id, partner_id, amount, applied_fee_rate, fee_amount, net_amount, card_bin, card_last4, "
    "approval_code, approved_at, status, created_at, updated_at"
)


def build_where(summary_filter: SummaryFilter) -> tuple[str, list[Any]]:
    """Translate a filter into a ``WHERE`` clause and its parameters."""
    clauses: list[str] = []
    params: list[Any] = []
    if summary_filter.partner_id is not None:
        clauses.append("partner_id = %s")
        params.append(summary_filter.partner_id)
    if summary_filter.status is not None:
        clauses.append("status = %s")
        params.append(summary_filter.status.value)
    if summary_filter.from_ is not None:
        clauses.append("created_at >= %s")
        params.append(summary_filter.from_)
    if summary_filter.to is not None:
        clauses.append("created_at <= %s")
        params.append(summary_filter.to)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


def build_page_sql(query: PaymentQuery) -> tuple[str, list[Any]]:
    """Keyset page query; fetches ``limit + 1`` rows to detect a next page."""
    where, params = build_where(query)
    if query.cursor_created_at is not None and query.cursor_id is not None:
        keyset = "(created_at, id) < (%s, %s)"
        where = f"{where} AND {keyset}" if where else f"WHERE {keyset}"
        params.extend([query.cursor_created_at, query.cursor_id])
    sql = (
        f"SELECT {PAYMENT_COLUMNS} FROM payment {where} "
        "ORDER BY created_at DESC, id DESC LIMIT %s"
    )
    params.append(query.limit + 1)
    return sql, params


def row_to_payment(row: dict[str, Any]) -> Payment:
    """Map a ``payment`` row onto the model."""
    return Payment(
        payment_id=row["id"],
        partner_id=row["partner_id"],
        amount=row["amount"],
        applied_fee_rate=row["applied_fee_rate"],
        fee_amount=row["fee_amount"],
        net_amount=row["net_amount"],
        card_bin=row["card_bin"],
        card_last4=row["card_last4"],
        approval_code=row["approval_code"],
        approved_at=row["approved_at"],
        status=PaymentStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresLedgerStore(LedgerRepository):
    """Ledger store backed by PostgreSQL.

    Each call opens its own connection and transaction, so a single store
    can be shared across threads.

    Parameters
    ----------
    conninfo : str
        libpq connection string (see ``PostgresConfig.connection_string``).
    connect : Callable
        Connection factory, ``psycopg.connect`` by default.
    """

    def __init__(self, conninfo: str, connect: Callable[..., psycopg.Connection] = psycopg.connect) -> None:
        self.conninfo = conninfo
        self._connect = connect

    def _connection(self) -> psycopg.Connection:
        return self._connect(self.conninfo, row_factory=dict_row)

    def create_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._connection() as conn:
            conn.execute(SCHEMA_SQL)
        logger.info("Ledger schema ready")

    def add_partner(self, partner: Partner) -> None:
        """Insert or update a partner."""
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO partner (id, code, name, active) VALUES (%s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE
                SET code = EXCLUDED.code, name = EXCLUDED.name, active = EXCLUDED.active
                """,
                (partner.partner_id, partner.code, partner.name, partner.active),
            )

    def add_fee_policy(self, policy: FeePolicy) -> FeePolicy:
        """Insert a fee policy version and return it with its id."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    """
                    INSERT INTO partner_fee_policy (partner_id, effective_from, percentage, fixed_fee)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id
                    """,
                    (policy.partner_id, policy.effective_from, policy.percentage, policy.fixed_fee),
                ).fetchone()
        except errors.ForeignKeyViolation as e:
            raise ReferentialIntegrityError(f"Partner {policy.partner_id} not found") from e
        return FeePolicy(
            policy_id=row["id"],
            partner_id=policy.partner_id,
            effective_from=policy.effective_from,
            percentage=policy.percentage,
            fixed_fee=policy.fixed_fee,
        )

    def find_partner(self, partner_id: int) -> Partner | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT id, code, name, active FROM partner WHERE id = %s",
                (partner_id,),
            ).fetchone()
        if row is None:
            return None
        return Partner(partner_id=row["id"], code=row["code"], name=row["name"], active=row["active"])

    def find_effective_policy(self, partner_id: int, as_of: datetime) -> FeePolicy | None:
        with self._connection() as conn:
            row = conn.execute(
                """
                SELECT id, partner_id, effective_from, percentage, fixed_fee
                FROM partner_fee_policy
                WHERE partner_id = %s AND effective_from <= %s
                ORDER BY effective_from DESC
                LIMIT 1
                """,
                (partner_id, as_of),
            ).fetchone()
        if row is None:
            return None
        return FeePolicy(
            policy_id=row["id"],
            partner_id=row["partner_id"],
            effective_from=row["effective_from"],
            percentage=row["percentage"],
            fixed_fee=row["fixed_fee"],
        )

    def save_payment(self, payment: Payment) -> Payment:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    f"""
                    INSERT INTO payment (
                        partner_id, amount, applied_fee_rate, fee_amount, net_amount,
                        card_bin, card_last4, approval_code, approved_at, status
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {PAYMENT_COLUMNS}
                    """,
                    (
                        payment.partner_id,
                        payment.amount,
                        payment.applied_fee_rate,
                        payment.fee_amount,
                        payment.net_amount,
                        payment.card_bin,
                        payment.card_last4,
                        payment.approval_code,
                        payment.approved_at,
                        payment.status.value,
                    ),
                ).fetchone()
        except errors.ForeignKeyViolation as e:
            raise ReferentialIntegrityError(f"Partner {payment.partner_id} not found") from e
        return row_to_payment(row)

    def find_page(self, query: PaymentQuery) -> PaymentPage:
        sql, params = build_page_sql(query)
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()

        has_next = len(rows) > query.limit
        items = [row_to_payment(row) for row in rows[: query.limit]]
        last = items[-1] if has_next and items else None
        return PaymentPage(
            items=items,
            has_next=has_next,
            next_cursor_created_at=last.created_at if last else None,
            next_cursor_id=last.payment_id if last else None,
        )

    def summary(self, summary_filter: SummaryFilter) -> PaymentSummary:
        where, params = build_where(summary_filter)
        with self._connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS count, COALESCE(SUM(amount), 0) AS total_amount, "
                f"COALESCE(SUM(net_amount), 0) AS total_net_amount FROM payment {where}",
                params,
            ).fetchone()
        return PaymentSummary(
            count=row["count"],
            total_amount=row["total_amount"],
            total_net_amount=row["total_net_amount"],
        )
