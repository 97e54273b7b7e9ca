# =============================================================================
# taskhub_core/services/product_service.py
# Product screens: add, edit, delete
# =============================================================================

from __future__ import annotations
from typing import Optional

from taskhub_core.config import Settings
from taskhub_core.errors import require_connection
from taskhub_core.models import Product
from taskhub_core.network import ConnectivityProbe
from taskhub_core.repositories import ProductRepository
from .base_service import ServiceResult
from .collection_service import CollectionService


class ProductService(CollectionService[Product]):
    """Operations behind the product list and product forms."""

    entity_name = "product"

    def __init__(
        self,
        repository: ProductRepository,
        probe: Optional[ConnectivityProbe] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(repository, probe, settings)

    async def add(
        self,
        name: str,
        price: float,
        description: str = "",
        category: str = "",
    ) -> ServiceResult:
        """Create a product; data is the refreshed list, metadata["id"] the new id."""
        return await self.run("Creating product", self._add, name, price, description, category)

    @require_connection()
    async def _add(self, name: str, price: float, description: str, category: str) -> ServiceResult:
        product_id = await self.repository.create(
            name=name, price=price, description=description, category=category
        )
        return await self._created(product_id)
