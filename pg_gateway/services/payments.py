"""Create-payment use case."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from pg_gateway.calculation import calculate_fee
from pg_gateway.exceptions import EntityNotFoundError, InvalidEntityStateError, RequestValidationError
from pg_gateway.models import ApprovalRequest, Payment, PaymentCommand, PaymentStatus
from pg_gateway.providers.base import strip_hyphens
from pg_gateway.providers.router import ProviderRouter
from pg_gateway.store.base import LedgerRepository

logger = logging.getLogger(__name__)

CARD_BIN_LENGTH = 6


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentService:
    """Approve, settle and record a payment.

    The pipeline runs strictly in order: partner and amount validation, provider
    selection, provider approval, fee policy resolution, fee calculation,
    persistence. Any failure ends the call; nothing is retried here.

    Parameters
    ----------
    repository : LedgerRepository
        Partner, fee policy and payment persistence.
    router : ProviderRouter
        Resolves the provider adapter for a partner.
    clock : Callable[[], datetime]
        Source of "now" for fee policy resolution.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        router: ProviderRouter,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.repository = repository
        self.router = router
        self.clock = clock

    def pay(self, command: PaymentCommand) -> Payment:
        partner = self.repository.find_partner(command.partner_id)
        if partner is None:
            raise EntityNotFoundError(f"Partner not found: {command.partner_id}")
        if not partner.active:
            raise InvalidEntityStateError(f"Partner is inactive: {partner.partner_id}")
        if not isinstance(command.amount, Decimal) or command.amount < 0:
            raise RequestValidationError("amount", f"amount must be a non-negative Decimal, got {command.amount!r}")

        provider = self.router.select(partner.partner_id)
        approval = provider.approve(
            ApprovalRequest(
                partner_id=partner.partner_id,
                amount=command.amount,
                card_number=command.card_number,
                birth_date=command.birth_date,
                expiry=command.expiry,
                password=command.password,
                card_bin=command.card_bin,
                card_last4=command.card_last4,
                product_name=command.product_name,
            )
        )

        policy = self.repository.find_effective_policy(partner.partner_id, self.clock())
        if policy is None:
            raise InvalidEntityStateError(f"No fee policy for partner {partner.partner_id}")
        fee, net = calculate_fee(command.amount, policy.percentage, policy.fixed_fee)

        if command.card_number is not None:
            card_bin = strip_hyphens(command.card_number)[:CARD_BIN_LENGTH]
        else:
            card_bin = command.card_bin
        card_last4 = approval.masked_card_last4 or command.card_last4

        saved = self.repository.save_payment(
            Payment(
                partner_id=partner.partner_id,
                amount=command.amount,
                applied_fee_rate=policy.percentage,
                fee_amount=fee,
                net_amount=net,
                card_bin=card_bin,
                card_last4=card_last4,
                approval_code=approval.approval_code,
                approved_at=approval.approved_at,
                status=PaymentStatus.APPROVED,
            )
        )
        logger.info(
            "Payment %s recorded for partner %d via %s: amount=%s fee=%s net=%s",
            saved.payment_id,
            partner.partner_id,
            provider.name,
            saved.amount,
            saved.fee_amount,
            saved.net_amount,
        )
        return saved
