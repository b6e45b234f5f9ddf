"""Storage sinks for uploaded report media."""

from .media_store import FirebaseMediaStore, LocalMediaStore, MediaStore

__all__ = ["MediaStore", "LocalMediaStore", "FirebaseMediaStore"]
