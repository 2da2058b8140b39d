"""Wiring of providers, store and services."""

from __future__ import annotations

import httpx

from pg_gateway.config import GatewayConfig, HttpClientConfig
from pg_gateway.models import Payment, PaymentCommand, QueryFilter, QueryResult
from pg_gateway.providers import MockPgClient, PaymentProvider, ProviderRouter, TestPgClient, TossPgClient
from pg_gateway.services import PaymentService, QueryPaymentsService
from pg_gateway.store.base import LedgerRepository


def build_http_client(config: HttpClientConfig) -> httpx.Client:
    """HTTP client shared by the provider adapters."""
    timeout = httpx.Timeout(config.read_timeout, connect=config.connect_timeout)
    return httpx.Client(timeout=timeout)


def build_providers(config: GatewayConfig, client: httpx.Client) -> list[PaymentProvider]:
    """Adapters partitioned by ``partner_id % 3``: 1 mock, 2 TestPG, 0 Toss."""
    return [
        MockPgClient(),
        TestPgClient(config.testpg, client),
        TossPgClient(config.toss, client),
    ]


class Gateway:
    """Entry point bundling the create and query operations over one store."""

    def __init__(
        self,
        payments: PaymentService,
        queries: QueryPaymentsService,
        http_client: httpx.Client | None = None,
        owns_client: bool = False,
    ) -> None:
        self.payments = payments
        self.queries = queries
        self.http_client = http_client
        self.owns_client = owns_client

    @classmethod
    def create(
        cls,
        config: GatewayConfig,
        repository: LedgerRepository,
        http_client: httpx.Client | None = None,
    ) -> Gateway:
        """Build a gateway with the default three-provider routing.

        A client passed in stays owned by the caller; one built here is
        closed by :meth:`close`.
        """
        owns_client = http_client is None
        client = build_http_client(config.http) if owns_client else http_client
        router = ProviderRouter(build_providers(config, client))
        return cls(
            PaymentService(repository, router),
            QueryPaymentsService(repository),
            client,
            owns_client=owns_client,
        )

    def pay(self, command: PaymentCommand) -> Payment:
        return self.payments.pay(command)

    def query(self, query_filter: QueryFilter) -> QueryResult:
        return self.queries.query(query_filter)

    def close(self) -> None:
        if self.owns_client and self.http_client is not None:
            self.http_client.close()

    def __enter__(self) -> Gateway:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
