"""
Pydantic schemas for data crossing the package boundary.
"""

from support_rag.schemas.knowledge import KnowledgeBase, KnowledgeItem

__all__ = ["KnowledgeBase", "KnowledgeItem"]
