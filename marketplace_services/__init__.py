"""Service layer: the transactional facade over the marketplace kernel."""

from marketplace_services.marketplace_service import MarketplaceService

__all__ = ["MarketplaceService"]
