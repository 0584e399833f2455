"""Blob storage for uploaded images."""

from .blob_store import BlobStore

__all__ = ['BlobStore']
