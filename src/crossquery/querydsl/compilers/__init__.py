from .base import BaseCompiler
from .request import SearchRequestCompiler, search_request
from .utils import filtered_query, filters_join, normalize_clause, queries_join

__all__ = (
    "BaseCompiler",
    "SearchRequestCompiler",
    "search_request",
    "filtered_query",
    "filters_join",
    "normalize_clause",
    "queries_join",
)
