#!/usr/bin/env python3
"""Seed a ledger with sample partners and payments, then print the first page.

Payments are authorized through the mock provider only (partner ids 1, 4, 7, ...),
so no provider credentials or network access are needed. Use ``--postgres-url``
to write into PostgreSQL instead of the in-memory store.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pg_gateway.config import GatewayConfig
from pg_gateway.gateway import Gateway
from pg_gateway.logging import setup_logging
from pg_gateway.models import QueryFilter
from pg_gateway.sample import SampleDataGenerator
from pg_gateway.serialization import query_result_to_dict
from pg_gateway.store.memory import InMemoryLedgerStore
from pg_gateway.store.postgres import PostgresLedgerStore

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--partners", type=int, default=4, help="Number of partners (default: 4)")
    parser.add_argument("--payments", type=int, default=50, help="Number of payments (default: 50)")
    parser.add_argument("--limit", type=int, default=10, help="Page size of the printed query (default: 10)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--postgres-url", default=None, help="Write to PostgreSQL instead of memory")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    config = GatewayConfig.from_env()
    setup_logging(args.log_level, config.log_format)

    if args.postgres_url:
        store = PostgresLedgerStore(args.postgres_url)
        store.create_schema()
    else:
        store = InMemoryLedgerStore()

    generator = SampleDataGenerator(seed=args.seed)
    partners = generator.generate_partners(args.partners, start_id=1, step=3)
    for partner in partners:
        store.add_partner(partner)
        for policy in generator.generate_fee_policies(partner):
            store.add_fee_policy(policy)
    logger.info("Seeded %d partners", len(partners))

    with Gateway.create(config, store) as gateway:
        for command in generator.generate_commands(partners, args.payments):
            gateway.pay(command)
        logger.info("Recorded %d payments", args.payments)

        result = gateway.query(QueryFilter(limit=args.limit))

    print(json.dumps(query_result_to_dict(result), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
