"""Back-office HTTP API package."""

from backoffice.api.errors import register_error_handlers
from backoffice.api.routes import contract_router, customer_router, event_router, order_router, product_router

__all__ = [
    "customer_router",
    "product_router",
    "order_router",
    "contract_router",
    "event_router",
    "register_error_handlers",
]
