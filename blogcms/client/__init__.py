"""Python admin client: HTTP access plus cached data-access hooks."""

from .api import ApiClient, ApiError
from .hooks import ContentHooks
from .query import Mutation, Query, QueryClient, query_key

__all__ = [
    "ApiClient",
    "ApiError",
    "ContentHooks",
    "Mutation",
    "Query",
    "QueryClient",
    "query_key",
]
