"""Provider adapter interface and helpers shared by every adapter."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from pg_gateway.exceptions import ProviderResponseError, ProviderUnavailableError, RequestValidationError
from pg_gateway.models import ApprovalRequest, ApprovalResult

logger = logging.getLogger(__name__)

PartnerPredicate = Callable[[int], bool]

CARD_FIELDS = ("card_number", "birth_date", "expiry", "password")


@dataclass(frozen=True)
class ModuloRoute:
    """Routing predicate matching partners with ``partner_id % divisor == remainder``."""

    divisor: int
    remainder: int

    def __call__(self, partner_id: int) -> bool:
        return partner_id % self.divisor == self.remainder


def strip_hyphens(card_number: str) -> str:
    return card_number.replace("-", "")


def masked_last4(request: ApprovalRequest) -> str | None:
    """Last four digits of the card number, else the supplied last-4."""
    if request.card_number is not None:
        return strip_hyphens(request.card_number)[-4:]
    return request.card_last4


class PaymentProvider(ABC):
    """Base class for payment provider adapters.

    Parameters
    ----------
    route : PartnerPredicate
        Decides which partners this adapter serves.
    """

    name: str = "provider"

    def __init__(self, route: PartnerPredicate) -> None:
        self.route = route

    def supports(self, partner_id: int) -> bool:
        """Whether this adapter handles payments for ``partner_id``."""
        return self.route(partner_id)

    @abstractmethod
    def approve(self, request: ApprovalRequest) -> ApprovalResult:
        """Authorize a payment, raising a ``ProviderError`` on failure."""
        ...

    def require_card_fields(self, request: ApprovalRequest) -> None:
        """Fail fast when a field mandatory for this provider is missing."""
        for field_name in CARD_FIELDS:
            if not getattr(request, field_name):
                raise RequestValidationError(field_name, f"{field_name} is required by {self.name}")


class HttpPaymentProvider(PaymentProvider):
    """Adapter that issues exactly one JSON POST per approval."""

    def __init__(self, client: httpx.Client, base_url: str, route: PartnerPredicate) -> None:
        super().__init__(route)
        self.client = client
        self.base_url = base_url.rstrip("/")

    def post_json(self, path: str, payload: dict[str, Any], headers: dict[str, str]) -> httpx.Response:
        """POST ``payload`` and return the response regardless of its status."""
        url = f"{self.base_url}{path}"
        logger.debug("POST %s via %s", url, self.name)
        try:
            return self.client.post(url, json=payload, headers=headers)
        except httpx.TransportError as e:
            raise ProviderUnavailableError(f"{self.name} unreachable: {e}") from e

    def parse_body(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a success body, rejecting empty or non-object payloads."""
        if not response.content:
            raise ProviderResponseError(
                f"Empty response from {self.name}", status_code=response.status_code, body=""
            )
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"Unparseable response from {self.name}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(body, dict):
            raise ProviderResponseError(
                f"Unexpected response from {self.name}",
                status_code=response.status_code,
                body=response.text,
            )
        return body
