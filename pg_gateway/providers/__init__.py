"""Payment provider adapters and routing."""

from pg_gateway.providers.base import HttpPaymentProvider, ModuloRoute, PaymentProvider
from pg_gateway.providers.mock import MockPgClient
from pg_gateway.providers.router import ProviderRouter
from pg_gateway.providers.testpg import TestPgClient
from pg_gateway.providers.toss import TossPgClient

__all__ = [
    "HttpPaymentProvider",
    "MockPgClient",
    "ModuloRoute",
    "PaymentProvider",
    "ProviderRouter",
    "TestPgClient",
    "TossPgClient",
]
