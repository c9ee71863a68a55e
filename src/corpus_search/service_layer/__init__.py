"""Service layer - orchestrates index lifecycle and query use cases."""

from .search_service import SearchService


__all__ = ["SearchService"]
