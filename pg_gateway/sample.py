"""Synthetic partners, fee policies and payment commands for demos."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

from faker import Faker

from pg_gateway.models import FeePolicy, Partner, PaymentCommand


class SampleDataGenerator:
    """Generate sample gateway data.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``ko_KR``).
    """

    RATES = [Decimal("0.0235"), Decimal("0.0250"), Decimal("0.0300"), Decimal("0.0330")]
    FIXED_FEES = [None, Decimal("50"), Decimal("100")]
    AMOUNT_RANGE = (1_000, 500_000)

    def __init__(self, seed: int | None = None, locale: str = "ko_KR") -> None:
        self.fake = Faker(locale)
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate_partners(self, count: int, start_id: int = 1, step: int = 1) -> list[Partner]:
        """Active partners with ids ``start_id, start_id + step, ...``."""
        partners = []
        for i in range(count):
            partner_id = start_id + i * step
            partners.append(
                Partner(
                    partner_id=partner_id,
                    code=f"P{partner_id:04d}",
                    name=self.fake.company(),
                    active=True,
                )
            )
        return partners

    def generate_fee_policies(self, partner: Partner, now: datetime | None = None) -> list[FeePolicy]:
        """Three versions: one past, one current and one not yet effective."""
        now = now or datetime.now(timezone.utc)
        offsets = [timedelta(days=365), timedelta(days=30), -timedelta(days=30)]
        return [
            FeePolicy(
                partner_id=partner.partner_id,
                effective_from=now - offset,
                percentage=self.random.choice(self.RATES),
                fixed_fee=self.random.choice(self.FIXED_FEES),
            )
            for offset in offsets
        ]

    def generate_command(self, partner: Partner) -> PaymentCommand:
        """Payment command with full card details."""
        digits = self.fake.credit_card_number(card_type="visa16")
        card_number = "-".join(digits[i : i + 4] for i in range(0, len(digits), 4))
        birth_date = self.fake.date_of_birth(minimum_age=19, maximum_age=80)
        return PaymentCommand(
            partner_id=partner.partner_id,
            amount=Decimal(self.random.randint(*self.AMOUNT_RANGE)),
            card_number=card_number,
            birth_date=birth_date.strftime("%Y%m%d"),
            expiry=self.fake.credit_card_expire(date_format="%m%y"),
            password=f"{self.random.randint(0, 99):02d}",
            product_name=self.fake.catch_phrase(),
        )

    def generate_commands(self, partners: list[Partner], count: int) -> Iterator[PaymentCommand]:
        """``count`` commands spread randomly over ``partners``."""
        for _ in range(count):
            yield self.generate_command(self.random.choice(partners))
