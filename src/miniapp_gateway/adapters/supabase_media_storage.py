"""Supabase Storage adapter for product media."""

from dataclasses import dataclass

from supabase import Client

from miniapp_gateway.services.products import MediaStorage


@dataclass
class SupabaseMediaStorage(MediaStorage):
    """Stores product media in a public Supabase Storage bucket."""

    client: Client
    bucket: str = "product-media"

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Upload bytes, replacing any object at the same path."""
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=content,
            file_options={"content-type": content_type, "upsert": "true"},
        )

    def public_url(self, path: str) -> str:
        """Return the public URL of a stored object."""
        return self.client.storage.from_(self.bucket).get_public_url(path)
