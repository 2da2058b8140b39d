"""Settlement calculations."""

from pg_gateway.calculation.fees import FEE_QUANTUM, calculate_fee

__all__ = ["FEE_QUANTUM", "calculate_fee"]
