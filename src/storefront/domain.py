"""Storefront bounded context — catalogue reads, shopping bag and orders.

Hosts the localized fragrance catalogue, the client-held shopping bag with
its server-side detail resolution, the checkout flow that turns a bag into a
priced order snapshot, and the order lifecycle actions used by customers and
the admin console.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
