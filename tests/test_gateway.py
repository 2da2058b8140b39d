"""Tests for gateway wiring, sample data and the sample data script."""

import importlib.util
import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import httpx
import pytest

from pg_gateway.config import GatewayConfig, HttpClientConfig, TestPgConfig, TossConfig
from pg_gateway.gateway import Gateway, build_http_client, build_providers
from pg_gateway.models import FeePolicy, Partner, PaymentCommand, QueryFilter
from pg_gateway.providers import MockPgClient, ProviderRouter, TestPgClient, TossPgClient
from pg_gateway.sample import SampleDataGenerator
from pg_gateway.store.memory import InMemoryLedgerStore

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "generate_sample_data.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("generate_sample_data", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(
        testpg=TestPgConfig(api_key="key", iv="AAAAAAAAAAAAAAAA", base_url="https://testpg.example"),
        toss=TossConfig(secret_key="test_sk", base_url="https://toss.example"),
    )


class TestBuild:
    """Tests for the wiring helpers."""

    def test_http_client_timeouts(self) -> None:
        client = build_http_client(HttpClientConfig(connect_timeout=1.5, read_timeout=7.0))
        try:
            assert client.timeout.connect == 1.5
            assert client.timeout.read == 7.0
        finally:
            client.close()

    def test_providers_in_order(self, config: GatewayConfig) -> None:
        with httpx.Client() as client:
            providers = build_providers(config, client)

        assert [type(p) for p in providers] == [MockPgClient, TestPgClient, TossPgClient]

    def test_routing_by_modulo(self, config: GatewayConfig) -> None:
        with httpx.Client() as client:
            router = ProviderRouter(build_providers(config, client))

        assert router.select(1).name == "MockPG"
        assert router.select(2).name == "TestPG"
        assert router.select(3).name == "Toss"


class TestGateway:
    """End-to-end tests through Gateway with a fake transport."""

    @pytest.fixture
    def toss_store(self, store: InMemoryLedgerStore) -> InMemoryLedgerStore:
        store.add_partner(Partner(partner_id=3, code="TOSS", name="Toss Partner"))
        store.add_fee_policy(
            FeePolicy(
                partner_id=3,
                effective_from=datetime(2020, 1, 1, tzinfo=timezone.utc),
                percentage=Decimal("0.0235"),
            )
        )
        return store

    def test_pay_and_query_mock(self, config: GatewayConfig, store: InMemoryLedgerStore) -> None:
        with Gateway.create(config, store, http_client=httpx.Client()) as gateway:
            payment = gateway.pay(PaymentCommand(partner_id=1, amount=Decimal("10000")))
            result = gateway.query(QueryFilter(partner_id=1))

        assert payment.fee_amount == Decimal("400")
        assert [p.payment_id for p in result.items] == [payment.payment_id]
        assert result.summary.count == 1

    def test_pay_through_toss(
        self,
        config: GatewayConfig,
        toss_store: InMemoryLedgerStore,
        card_command: PaymentCommand,
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "paymentKey": "pk_1",
                    "status": "DONE",
                    "approvedAt": "2024-01-01T09:00:00+09:00",
                    "card": {"number": "11112222****4444"},
                },
            )

        client = httpx.Client(transport=httpx.MockTransport(handler))
        card_command.partner_id = 3
        card_command.amount = Decimal("1050")

        with Gateway.create(config, toss_store, http_client=client) as gateway:
            payment = gateway.pay(card_command)

        assert len(seen) == 1
        assert seen[0].url.path == "/v1/payments/key-in"
        assert payment.approval_code == "pk_1"
        assert payment.fee_amount == Decimal("25")
        assert payment.net_amount == Decimal("1025")
        assert payment.card_bin == "111122"
        assert payment.card_last4 == "4444"

    def test_close_leaves_caller_client_open(self, config: GatewayConfig, store: InMemoryLedgerStore) -> None:
        with httpx.Client() as client:
            with Gateway.create(config, store, http_client=client) as gateway:
                gateway.pay(PaymentCommand(partner_id=1, amount=Decimal("1000")))

            assert not client.is_closed
            assert gateway.owns_client is False

    def test_close_closes_built_client(self, config: GatewayConfig, store: InMemoryLedgerStore) -> None:
        gateway = Gateway.create(config, store)

        assert gateway.owns_client is True
        assert not gateway.http_client.is_closed

        gateway.close()

        assert gateway.http_client.is_closed


class TestSampleDataGenerator:
    """Tests for SampleDataGenerator."""

    def test_partners(self) -> None:
        partners = SampleDataGenerator(seed=1).generate_partners(3, start_id=1, step=3)

        assert [p.partner_id for p in partners] == [1, 4, 7]
        assert [p.code for p in partners] == ["P0001", "P0004", "P0007"]
        assert all(p.active and p.name for p in partners)

    def test_fee_policies_versioned(self) -> None:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        partner = Partner(partner_id=1, code="P0001", name="One")

        policies = SampleDataGenerator(seed=1).generate_fee_policies(partner, now=now)

        assert len(policies) == 3
        assert sum(1 for p in policies if p.effective_from > now) == 1
        assert all(Decimal("0") <= p.percentage <= Decimal("1") for p in policies)

    def test_command(self) -> None:
        partner = Partner(partner_id=1, code="P0001", name="One")

        command = SampleDataGenerator(seed=1).generate_command(partner)

        assert command.partner_id == 1
        assert 1_000 <= command.amount <= 500_000
        assert len(command.card_number.replace("-", "")) == 16
        assert len(command.birth_date) == 8
        assert len(command.expiry) == 4
        assert len(command.password) == 2

    def test_seed_reproducible(self) -> None:
        partners = [Partner(partner_id=1, code="P0001", name="One")]

        first = list(SampleDataGenerator(seed=42).generate_commands(partners, 5))
        second = list(SampleDataGenerator(seed=42).generate_commands(partners, 5))

        assert first == second


class TestGenerateSampleDataScript:
    """Tests for scripts/generate_sample_data.py."""

    def test_parse_args_defaults(self) -> None:
        args = _load_script().parse_args([])

        assert args.partners == 4
        assert args.payments == 50
        assert args.limit == 10
        assert args.seed is None
        assert args.postgres_url is None

    @pytest.mark.usefixtures("restore_root_logger")
    def test_main_in_memory(self, capsys: pytest.CaptureFixture[str]) -> None:
        script = _load_script()

        script.main(
            ["--partners", "2", "--payments", "5", "--limit", "3", "--seed", "7", "--log-level", "WARNING"]
        )

        data = json.loads(capsys.readouterr().out)
        assert len(data["items"]) == 3
        assert data["hasNext"] is True
        assert data["nextCursor"]
        assert data["summary"]["count"] == 5
        assert {item["partnerId"] for item in data["items"]} <= {1, 4}
