# =============================================================================
# taskhub_core/repositories/product_repository.py
# Product repository: the `products` table as Product entities
# =============================================================================

from __future__ import annotations
from typing import Any, Dict

from taskhub_core.models import Product
from .base import EntityRepository


class ProductRepository(EntityRepository[Product]):
    """CRUD for products."""

    collection = "products"

    def from_record(self, record: Dict[str, Any]) -> Product:
        price = record.get("price")
        return Product(
            id=str(record["id"]),
            name=record.get("name") or "",
            description=record.get("description") or "",
            price=float(price) if price is not None else 0.0,
            category=record.get("category") or "",
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    def to_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if k in Product.EDITABLE_FIELDS}

    async def create(
        self,
        name: str,
        price: float,
        description: str = "",
        category: str = "",
    ) -> str:
        """Create a product and return its id."""
        fields = {"name": name, "description": description, "price": price, "category": category}
        return await self.gateway.create(self.collection, fields)
