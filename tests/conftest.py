"""Pytest configuration and fixtures."""

import logging
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pg_gateway.models import FeePolicy, Partner, PaymentCommand
from pg_gateway.store.memory import InMemoryLedgerStore


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def active_partner() -> Partner:
    """Active partner routed to the mock provider."""
    return Partner(partner_id=1, code="TEST", name="Test Partner", active=True)


@pytest.fixture
def inactive_partner() -> Partner:
    """Disabled partner."""
    return Partner(partner_id=4, code="OFF", name="Disabled Partner", active=False)


@pytest.fixture
def fee_policy(active_partner: Partner) -> FeePolicy:
    """3% + 100 policy effective since 2020."""
    return FeePolicy(
        partner_id=active_partner.partner_id,
        effective_from=datetime(2020, 1, 1, tzinfo=timezone.utc),
        percentage=Decimal("0.0300"),
        fixed_fee=Decimal("100"),
    )


@pytest.fixture
def store(active_partner: Partner, inactive_partner: Partner, fee_policy: FeePolicy) -> InMemoryLedgerStore:
    """Store seeded with two partners and one fee policy."""
    store = InMemoryLedgerStore()
    store.add_partner(active_partner)
    store.add_partner(inactive_partner)
    store.add_fee_policy(fee_policy)
    return store


@pytest.fixture
def card_command() -> PaymentCommand:
    """Command carrying every card field the HTTP providers need."""
    return PaymentCommand(
        partner_id=1,
        amount=Decimal("10000"),
        card_number="1111-2222-3333-4444",
        birth_date="19900101",
        expiry="1227",
        password="12",
        product_name="Test product",
    )


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging changes to the root logger."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
