"""TestPG client: card details travel AES-256-GCM encrypted in a single ``enc`` field."""

import json
import logging
from datetime import datetime, timezone

import httpx

from pg_gateway.config import TestPgConfig
from pg_gateway.exceptions import (
    ProviderAuthenticationError,
    ProviderRejectedError,
    ProviderResponseError,
)
from pg_gateway.models import ApprovalRequest, ApprovalResult, PaymentStatus
from pg_gateway.providers.base import HttpPaymentProvider, ModuloRoute, PartnerPredicate, masked_last4
from pg_gateway.providers.encryption import encrypt_payload

logger = logging.getLogger(__name__)

APPROVE_PATH = "/api/v1/pay/credit-card"


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class TestPgClient(HttpPaymentProvider):
    """Adapter for the TestPG credit-card API. Serves partners 2, 5, 8, ... by default."""

    __test__ = False  # not a pytest test class

    name = "TestPG"

    def __init__(
        self,
        config: TestPgConfig,
        client: httpx.Client,
        route: PartnerPredicate = ModuloRoute(3, 2),
    ) -> None:
        super().__init__(client, config.base_url, route)
        self.config = config

    def build_payload(self, request: ApprovalRequest) -> str:
        """Serialize the card details that get encrypted."""
        return json.dumps(
            {
                "cardNumber": request.card_number,
                "birthDate": request.birth_date,
                "expiry": request.expiry,
                "password": request.password,
                "amount": int(request.amount),
            }
        )

    def approve(self, request: ApprovalRequest) -> ApprovalResult:
        self.require_card_fields(request)

        encrypted = encrypt_payload(self.build_payload(request), self.config.api_key, self.config.iv)
        response = self.post_json(
            APPROVE_PATH,
            {"enc": encrypted},
            headers={"API-KEY": self.config.api_key},
        )

        if response.status_code == 422:
            raise ProviderRejectedError(
                f"Payment rejected by TestPG: {response.text}",
                status_code=422,
                body=response.text,
            )
        if response.status_code == 401:
            raise ProviderAuthenticationError(
                "TestPG authentication failed: invalid API key",
                status_code=401,
                body=response.text,
            )
        if not response.is_success:
            raise ProviderResponseError(
                f"TestPG error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        body = self.parse_body(response)
        try:
            result = ApprovalResult(
                approval_code=str(body["approvalCode"]),
                approved_at=_parse_timestamp(body["approvedAt"]),
                masked_card_last4=body.get("maskedCardLast4") or masked_last4(request),
                status=PaymentStatus.APPROVED,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderResponseError(
                f"Malformed TestPG response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        logger.info("TestPG approval %s for partner %d", result.approval_code, request.partner_id)
        return result
