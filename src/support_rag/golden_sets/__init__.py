"""
Golden Sets Package

Provides retrieval cases with expected documents for evaluating the
retriever against the seed knowledge base.

Example:
    from support_rag.golden_sets import GoldenQuery, get_all_golden_queries
"""

from support_rag.golden_sets.support_queries import (
    GoldenQuery,
    SUPPORT_QUERIES,
    get_all_golden_queries,
    get_query_by_id,
)

__all__ = [
    "GoldenQuery",
    "SUPPORT_QUERIES",
    "get_all_golden_queries",
    "get_query_by_id",
]
