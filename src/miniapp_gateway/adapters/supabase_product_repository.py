"""Supabase-backed product repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from miniapp_gateway.domain.products import Product
from miniapp_gateway.services.products import ProductRepository


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase implementation for the user_products table."""

    client: Client

    def count_active(self, user_profile_id: UUID) -> int:
        """Return the number of active products of a profile."""
        response = (
            self.client.table("user_products")
            .select("id", count="exact", head=True)
            .eq("user_profile_id", str(user_profile_id))
            .eq("is_active", True)
            .execute()
        )
        return response.count or 0

    def create_product(self, payload: dict[str, object]) -> Product:
        """Insert a product row and return it."""
        response = self.client.table("user_products").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create product in Supabase")
        return _parse_row(response.data[0])

    def get_product(self, product_id: UUID) -> Product | None:
        """Return a product by id, if present."""
        response = (
            self.client.table("user_products")
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def update_product(self, product_id: UUID, payload: dict[str, object]) -> Product:
        """Update a product row and return it."""
        response = (
            self.client.table("user_products")
            .update(payload)
            .eq("id", str(product_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update product in Supabase")
        return _parse_row(response.data[0])

    def delete_product(self, product_id: UUID) -> None:
        """Delete a product row."""
        self.client.table("user_products").delete().eq("id", str(product_id)).execute()


def _parse_row(row: dict[str, object]) -> Product:
    created_raw = row.get("created_at")
    return Product(
        id=UUID(str(row["id"])),
        user_profile_id=UUID(str(row["user_profile_id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        price=float(row.get("price") or 0.0),
        currency=str(row.get("currency") or "RUB"),
        media_url=row.get("media_url"),
        media_type=row.get("media_type"),
        link=row.get("link"),
        is_active=row.get("is_active") is not False,
        created_at=datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None,
    )
