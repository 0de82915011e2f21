"""
Context and prompt assembly for the support chat.

Turns the retriever's output into the text block the chat model sees. The
chat-completion call itself lives in the surrounding application.
"""

from __future__ import annotations

from typing import Sequence

from support_rag.retrieval.document import Document

NO_MATCH_CONTEXT = (
    "No direct match in custom knowledge base. "
    "Use general product knowledge if appropriate."
)

SUPPORT_GUIDELINES = """You are a product support AI specialized in providing accurate answers based on the provided knowledge base.

IMPORTANT GUIDELINES:
1. **Strictly use only the information provided in the context** for your answers
2. **Do not invent or assume any information** not explicitly stated in the context
3. **Cite the source** of your information by referencing the knowledge item number
4. **If no relevant information is found**, clearly state that you don't have specific information about the topic
5. **Be concise and direct** in your responses
6. **Maintain a professional and helpful tone**"""


def build_context(documents: Sequence[Document]) -> str:
    """Render documents as numbered knowledge items, or the no-match notice."""
    if not documents:
        return NO_MATCH_CONTEXT
    return "\n\n".join(
        f"[Knowledge Item {n}: {doc.title}]\n{doc.content}"
        for n, doc in enumerate(documents, start=1)
    )


def build_prompt(query: str, documents: Sequence[Document]) -> str:
    """Full user-turn prompt: guidelines, context block, then the question."""
    return (
        f"{SUPPORT_GUIDELINES}\n\n"
        f"Context:\n{build_context(documents)}\n\n"
        f"User Question: {query}"
    )


def build_messages(
    query: str,
    documents: Sequence[Document],
    system_instruction: str,
) -> list[dict[str, str]]:
    """OpenAI-style chat messages ready for a chat-completion call."""
    return [
        {"role": "system", "content": system_instruction},
        {"role": "user", "content": build_prompt(query, documents)},
    ]
