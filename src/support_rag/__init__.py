"""
support-rag - knowledge retrieval for product support chat.

Picks the knowledge-base entries to inject into a support prompt:
embedding similarity first, keyword scoring as the fallback.

Example:
    from support_rag import create_retriever, build_prompt

    retriever = create_retriever()
    docs = retriever.rank("how do I reset the hub", knowledge_base)
    prompt = build_prompt("how do I reset the hub", docs)
"""

from support_rag.retrieval import (
    Document,
    KnowledgeRetriever,
    build_prompt,
    create_retriever,
)

__version__ = "0.1.0"

__all__ = [
    "Document",
    "KnowledgeRetriever",
    "build_prompt",
    "create_retriever",
]
