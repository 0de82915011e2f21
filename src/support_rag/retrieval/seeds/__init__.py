"""
Seed data for the retrieval system.

This package contains externalized knowledge base content.
Separating data from infrastructure enables:
- Content updates without code changes
- Easy testing with controlled data
"""

from support_rag.retrieval.seeds.product_knowledge import get_product_documents

__all__ = ["get_product_documents"]
