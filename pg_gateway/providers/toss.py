"""Toss Payments key-in API client (Basic auth with the secret key)."""

import base64
import logging
import time
import uuid
from datetime import datetime, timezone

import httpx

from pg_gateway.config import TossConfig
from pg_gateway.exceptions import (
    ProviderAuthenticationError,
    ProviderAuthorizationError,
    ProviderBadRequestError,
    ProviderRejectedError,
    ProviderResponseError,
)
from pg_gateway.models import ApprovalRequest, ApprovalResult, PaymentStatus
from pg_gateway.providers.base import (
    HttpPaymentProvider,
    ModuloRoute,
    PartnerPredicate,
    masked_last4,
    strip_hyphens,
)

logger = logging.getLogger(__name__)

KEY_IN_PATH = "/v1/payments/key-in"
DEFAULT_ORDER_NAME = "결제"
ORDER_ID_MAX_LENGTH = 64

STATUS_MAP = {
    "DONE": PaymentStatus.APPROVED,
    "CANCELED": PaymentStatus.CANCELED,
    "PARTIAL_CANCELED": PaymentStatus.CANCELED,
    "ABORTED": PaymentStatus.CANCELED,
    "EXPIRED": PaymentStatus.CANCELED,
}

ERROR_MAP = {
    400: (ProviderBadRequestError, "Toss request error"),
    401: (ProviderAuthenticationError, "Toss authentication failed: invalid secret key"),
    403: (ProviderAuthorizationError, "Toss authorization failed: key-in payments not permitted"),
    422: (ProviderRejectedError, "Payment rejected by Toss"),
}


def basic_auth_header(secret_key: str) -> str:
    """``Basic base64("<secret_key>:")``."""
    token = base64.b64encode(f"{secret_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def split_expiry(expiry: str) -> tuple[str, str]:
    """Split ``MMYY`` into ``(month, year)``."""
    return expiry[0:2], expiry[2:4]


def customer_identity_number(birth_date: str) -> str:
    """YYYYMMDD becomes YYMMDD; 6-digit birth dates and 10-digit business numbers pass through."""
    if len(birth_date) == 8:
        return birth_date[2:]
    return birth_date


def generate_order_id() -> str:
    """Unique order id: 6-64 chars of letters, digits, ``-`` and ``_``."""
    return f"ORDER_{int(time.time() * 1000)}_{uuid.uuid4().hex}"[:ORDER_ID_MAX_LENGTH]


def map_status(status: str | None) -> PaymentStatus:
    """Map a Toss payment status onto the local vocabulary.

    Unknown statuses are treated as approved.
    """
    mapped = STATUS_MAP.get(status or "")
    if mapped is None:
        logger.warning("Unrecognized Toss payment status %r treated as APPROVED", status)
        return PaymentStatus.APPROVED
    return mapped


def _parse_approved_at(value: str | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class TossPgClient(HttpPaymentProvider):
    """Adapter for the Toss Payments key-in API. Serves partners 3, 6, 9, ... by default."""

    name = "Toss"

    def __init__(
        self,
        config: TossConfig,
        client: httpx.Client,
        route: PartnerPredicate = ModuloRoute(3, 0),
    ) -> None:
        super().__init__(client, config.base_url, route)
        self.config = config

    def build_body(self, request: ApprovalRequest) -> dict:
        """Build the key-in request body from a validated request."""
        month, year = split_expiry(request.expiry)
        return {
            "method": "카드",
            "amount": int(request.amount),
            "orderId": generate_order_id(),
            "orderName": request.product_name or DEFAULT_ORDER_NAME,
            "cardNumber": strip_hyphens(request.card_number),
            "cardExpirationYear": year,
            "cardExpirationMonth": month,
            "cardPassword": request.password,
            "customerIdentityNumber": customer_identity_number(request.birth_date),
        }

    def approve(self, request: ApprovalRequest) -> ApprovalResult:
        self.require_card_fields(request)

        response = self.post_json(
            KEY_IN_PATH,
            self.build_body(request),
            headers={"Authorization": basic_auth_header(self.config.secret_key)},
        )

        if response.status_code in ERROR_MAP:
            error_cls, message = ERROR_MAP[response.status_code]
            raise error_cls(
                f"{message}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.is_success:
            raise ProviderResponseError(
                f"Toss API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        body = self.parse_body(response)
        card = body.get("card") or {}
        reported_number = card.get("number") if isinstance(card, dict) else None
        try:
            result = ApprovalResult(
                approval_code=str(body["paymentKey"]),
                approved_at=_parse_approved_at(body.get("approvedAt")),
                masked_card_last4=reported_number[-4:] if reported_number else masked_last4(request),
                status=map_status(body.get("status")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderResponseError(
                f"Malformed Toss response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        logger.info(
            "Toss approval %s for partner %d (status=%s)",
            result.approval_code,
            request.partner_id,
            result.status.value,
        )
        return result
