"""Filesystem-backed object store keyed by ``<user_id>/<object name>`` paths."""

from functools import lru_cache

import anyio

from ..config.settings import get_settings


class ObjectStorage:
    """Store, read and delete raw objects under a root directory.

    Keys are relative POSIX paths such as ``user-1/3f2c....pdf``. Keys that
    would escape the root directory are rejected.
    """

    def __init__(self, root: str):
        self.root = anyio.Path(root)

    def _resolve(self, key: str) -> anyio.Path:
        if not key or key.startswith("/") or ".." in key.split("/"):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key

    async def upload(self, key: str, data: bytes, overwrite: bool = False) -> str:
        """Write ``data`` at ``key`` and return the key.

        Raises:
            FileExistsError: If the key exists and ``overwrite`` is false.
        """
        path = self._resolve(key)
        if not overwrite and await path.exists():
            raise FileExistsError(f"Object already exists: {key}")
        await path.parent.mkdir(parents=True, exist_ok=True)
        await path.write_bytes(data)
        return key

    async def download(self, key: str) -> bytes:
        """Read the object stored at ``key``.

        Raises:
            FileNotFoundError: If nothing is stored at ``key``.
        """
        path = self._resolve(key)
        if not await path.exists():
            raise FileNotFoundError(f"Object not found: {key}")
        return await path.read_bytes()

    async def delete(self, key: str) -> bool:
        """Delete the object at ``key``; returns False when it did not exist."""
        path = self._resolve(key)
        if not await path.exists():
            return False
        await path.unlink()
        return True

    async def exists(self, key: str) -> bool:
        return await self._resolve(key).exists()


@lru_cache()
def get_object_storage() -> ObjectStorage:
    """Get singleton object storage rooted at ``STORAGE_ROOT``."""
    return ObjectStorage(get_settings().STORAGE_ROOT)
