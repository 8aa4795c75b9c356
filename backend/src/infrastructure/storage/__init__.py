"""Object storage for uploaded PDF bytes."""

from .service import ObjectStorage, get_object_storage

__all__ = ["ObjectStorage", "get_object_storage"]
