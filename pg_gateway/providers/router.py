"""Provider selection."""

from collections.abc import Iterable

from pg_gateway.exceptions import InvalidEntityStateError
from pg_gateway.providers.base import PaymentProvider


class ProviderRouter:
    """Picks the first registered adapter whose ``supports`` accepts a partner."""

    def __init__(self, providers: Iterable[PaymentProvider]) -> None:
        self.providers = list(providers)

    def select(self, partner_id: int) -> PaymentProvider:
        for provider in self.providers:
            if provider.supports(partner_id):
                return provider
        raise InvalidEntityStateError(f"No provider for partner {partner_id}")
