"""Mapping uploaded image URLs to the public paths stored on records."""

from typing import Optional, Protocol
from urllib.parse import urlparse


class ObjectStorage(Protocol):
    def normalize_path(self, url: str) -> str:
        ...


class PrefixObjectStorage:
    """
    Rewrites URLs that point into the configured bucket as public object paths.

    ``https://storage.example.com/bucket/public/a.jpg`` with prefix
    ``https://storage.example.com/bucket/public`` becomes ``/objects/a.jpg``.
    Anything outside the prefix is returned unchanged.
    """

    def __init__(self, public_prefix: Optional[str] = None):
        self._prefix = public_prefix.rstrip("/") if public_prefix else None

    def normalize_path(self, url: str) -> str:
        url = url.strip()
        if not self._prefix or not url.startswith(self._prefix + "/"):
            return url
        object_name = url[len(self._prefix) + 1:]
        object_name = urlparse(object_name).path.lstrip("/")
        return f"/objects/{object_name}"
