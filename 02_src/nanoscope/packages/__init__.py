"""Package retrieval module."""

from .retriever import FlashError, IPackageRetriever, PackageRetriever, cache_key

__all__ = ["FlashError", "IPackageRetriever", "PackageRetriever", "cache_key"]
