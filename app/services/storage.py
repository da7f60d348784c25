from __future__ import annotations

import uuid
from pathlib import Path
from typing import Protocol

from app.core.config import settings

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class ObjectStore(Protocol):
    """Accepts raw bytes, returns a stable URL. Listings only keep the URL."""

    def put_bytes(self, *, key: str, data: bytes) -> str:
        ...


class LocalObjectStore:
    def __init__(self, base_dir: str, base_url: str):
        self.base = Path(base_dir)
        self.base_url = base_url.rstrip("/")
        self.base.mkdir(parents=True, exist_ok=True)

    def put_bytes(self, *, key: str, data: bytes) -> str:
        path = self.base / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return f"{self.base_url}/{key}"


def image_key(owner_id: str, content_type: str) -> str:
    return f"listings/{owner_id}/{uuid.uuid4().hex}{IMAGE_EXTENSIONS[content_type]}"


def get_object_store() -> ObjectStore:
    return LocalObjectStore(settings.media_dir, settings.media_base_url)
