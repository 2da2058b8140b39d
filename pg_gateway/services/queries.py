"""Payment history query use case."""

from datetime import datetime, timezone

from pg_gateway.cursor import decode_cursor, encode_cursor
from pg_gateway.models import PaymentQuery, PaymentStatus, QueryFilter, QueryResult, SummaryFilter
from pg_gateway.store.base import LedgerRepository


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class QueryPaymentsService:
    """Cursor-paginated payment listing with a summary over the whole filter.

    The summary ignores pagination: it aggregates every payment matching the
    partner/status/period filter, not only the returned page. Malformed
    cursors restart from the first page.
    """

    def __init__(self, repository: LedgerRepository) -> None:
        self.repository = repository

    def query(self, query_filter: QueryFilter) -> QueryResult:
        if query_filter.limit < 1:
            raise ValueError(f"limit must be positive, got {query_filter.limit}")

        cursor_created_at, cursor_id = decode_cursor(query_filter.cursor)
        status = PaymentStatus(query_filter.status) if query_filter.status is not None else None
        summary_filter = SummaryFilter(
            partner_id=query_filter.partner_id,
            status=status,
            from_=_as_utc(query_filter.from_),
            to=_as_utc(query_filter.to),
        )

        page = self.repository.find_page(
            PaymentQuery(
                partner_id=summary_filter.partner_id,
                status=summary_filter.status,
                from_=summary_filter.from_,
                to=summary_filter.to,
                limit=query_filter.limit,
                cursor_created_at=cursor_created_at,
                cursor_id=cursor_id,
            )
        )
        summary = self.repository.summary(summary_filter)

        next_cursor = None
        if page.has_next:
            next_cursor = encode_cursor(page.next_cursor_created_at, page.next_cursor_id)
        return QueryResult(
            items=page.items,
            summary=summary,
            next_cursor=next_cursor,
            has_next=page.has_next,
        )
