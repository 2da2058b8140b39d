"""Payment use cases."""

from pg_gateway.services.payments import PaymentService
from pg_gateway.services.queries import QueryPaymentsService

__all__ = ["PaymentService", "QueryPaymentsService"]
