"""JSON-safe serialization of gateway results."""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pg_gateway.models import Payment, QueryResult

PAYMENT_RESPONSE_FIELDS = {
    "payment_id": "id",
    "partner_id": "partnerId",
    "amount": "amount",
    "applied_fee_rate": "appliedFeeRate",
    "fee_amount": "feeAmount",
    "net_amount": "netAmount",
    "card_last4": "cardLast4",
    "approval_code": "approvalCode",
    "approved_at": "approvedAt",
    "status": "status",
    "created_at": "createdAt",
}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return {k: serialize_value(v) for k, v in asdict(value).items()}
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def payment_to_response(payment: Payment) -> dict[str, Any]:
    """Payment in the camelCase shape returned to API callers (card BIN omitted)."""
    data = dataclass_to_dict(payment)
    return {key: data[attr] for attr, key in PAYMENT_RESPONSE_FIELDS.items()}


def query_result_to_dict(result: QueryResult) -> dict[str, Any]:
    """Query result in the API response shape."""
    return {
        "items": [payment_to_response(p) for p in result.items],
        "summary": {
            "count": result.summary.count,
            "totalAmount": serialize_value(result.summary.total_amount),
            "totalNetAmount": serialize_value(result.summary.total_net_amount),
        },
        "nextCursor": result.next_cursor,
        "hasNext": result.has_next,
    }
