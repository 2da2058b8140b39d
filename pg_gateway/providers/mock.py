"""Mock provider that approves everything without a network call."""

import logging
import random
from datetime import datetime, timezone

from pg_gateway.models import ApprovalRequest, ApprovalResult, PaymentStatus
from pg_gateway.providers.base import ModuloRoute, PartnerPredicate, PaymentProvider, masked_last4

logger = logging.getLogger(__name__)


class MockPgClient(PaymentProvider):
    """Stand-in for providers that are not integrated yet.

    Serves partners 1, 4, 7, ... by default. Approval codes are ``MMDD``
    followed by four random digits.
    """

    name = "MockPG"

    def __init__(self, route: PartnerPredicate = ModuloRoute(3, 1)) -> None:
        super().__init__(route)

    def approve(self, request: ApprovalRequest) -> ApprovalResult:
        now = datetime.now(timezone.utc)
        approval_code = f"{now:%m%d}{random.randrange(10000):04d}"
        logger.info("Mock approval %s for partner %d", approval_code, request.partner_id)
        return ApprovalResult(
            approval_code=approval_code,
            approved_at=now,
            masked_card_last4=masked_last4(request),
            status=PaymentStatus.APPROVED,
        )
