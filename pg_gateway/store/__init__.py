"""Ledger persistence."""

from pg_gateway.store.base import LedgerRepository, select_effective_policy
from pg_gateway.store.memory import InMemoryLedgerStore

__all__ = ["InMemoryLedgerStore", "LedgerRepository", "select_effective_policy"]
