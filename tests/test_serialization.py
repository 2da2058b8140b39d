"""Tests for response serialization."""

import json
from datetime import date, datetime, timezone
from decimal import Decimal

from pg_gateway.models import Payment, PaymentStatus, PaymentSummary, QueryResult
from pg_gateway.serialization import (
    dataclass_to_dict,
    payment_to_response,
    query_result_to_dict,
    serialize_value,
)

CREATED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _payment() -> Payment:
    return Payment(
        payment_id=5,
        partner_id=1,
        amount=Decimal("10000"),
        applied_fee_rate=Decimal("0.0300"),
        fee_amount=Decimal("400"),
        net_amount=Decimal("9600"),
        card_bin="111122",
        card_last4="4444",
        approval_code="01011234",
        approved_at=CREATED_AT,
        status=PaymentStatus.APPROVED,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


class TestSerializeValue:
    """Tests for serialize_value function."""

    def test_decimal(self) -> None:
        assert serialize_value(Decimal("9600")) == "9600"

    def test_enum(self) -> None:
        assert serialize_value(PaymentStatus.CANCELED) == "CANCELED"

    def test_date(self) -> None:
        assert serialize_value(date(2024, 3, 15)) == "2024-03-15"

    def test_nested(self) -> None:
        result = serialize_value({"items": [Decimal("1"), PaymentStatus.APPROVED], "n": None})
        assert result == {"items": ["1", "APPROVED"], "n": None}

    def test_nested_dataclass(self) -> None:
        result = serialize_value(PaymentSummary(count=1, total_amount=Decimal("10"), total_net_amount=Decimal("9")))
        assert result == {"count": 1, "total_amount": "10", "total_net_amount": "9"}


class TestDataclassToDict:
    """Tests for dataclass_to_dict function."""

    def test_converts_all_fields(self) -> None:
        result = dataclass_to_dict(_payment())
        assert result["status"] == "APPROVED"
        assert result["card_bin"] == "111122"
        assert json.loads(json.dumps(result)) == result


class TestResponseShape:
    """Tests for the caller-facing response shape."""

    def test_payment_response(self) -> None:
        response = payment_to_response(_payment())

        assert response == {
            "id": 5,
            "partnerId": 1,
            "amount": "10000",
            "appliedFeeRate": "0.0300",
            "feeAmount": "400",
            "netAmount": "9600",
            "cardLast4": "4444",
            "approvalCode": "01011234",
            "approvedAt": "2024-01-01T12:00:00+00:00",
            "status": "APPROVED",
            "createdAt": "2024-01-01T12:00:00+00:00",
        }

    def test_card_bin_not_exposed(self) -> None:
        assert "111122" not in json.dumps(payment_to_response(_payment()))

    def test_query_result(self) -> None:
        result = QueryResult(
            items=[_payment()],
            summary=PaymentSummary(count=3, total_amount=Decimal("35000"), total_net_amount=Decimal("33950")),
            next_cursor="MTcwNDExMDQwMDAwMDo1",
            has_next=True,
        )

        data = query_result_to_dict(result)

        assert [item["id"] for item in data["items"]] == [5]
        assert data["summary"] == {"count": 3, "totalAmount": "35000", "totalNetAmount": "33950"}
        assert data["nextCursor"] == "MTcwNDExMDQwMDAwMDo1"
        assert data["hasNext"] is True
        json.dumps(data)

    def test_empty_result(self) -> None:
        data = query_result_to_dict(QueryResult(items=[], summary=PaymentSummary(), next_cursor=None, has_next=False))
        assert data == {
            "items": [],
            "summary": {"count": 0, "totalAmount": "0", "totalNetAmount": "0"},
            "nextCursor": None,
            "hasNext": False,
        }
