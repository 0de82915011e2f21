"""
Golden retrieval cases for the SmartHome Hub seed knowledge base.

Each case is a question an end user would type into the chat widget,
paired with the knowledge entries that MUST be picked for a grounded answer.
We don't specify the answer text; retrieval is judged on document ids only.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GoldenQuery:
    """A single golden retrieval case."""

    id: str
    description: str
    query: str
    expected_doc_ids: list[str] = field(default_factory=list)


SUPPORT_QUERIES: list[GoldenQuery] = [
    GoldenQuery(
        id="install-001",
        description="Single keyword matching a title prefix",
        query="install",
        expected_doc_ids=["kb_installation_guide"],
    ),
    GoldenQuery(
        id="reset-001",
        description="Phrase matching title and body exactly",
        query="factory reset",
        expected_doc_ids=["kb_factory_reset"],
    ),
    GoldenQuery(
        id="wifi-001",
        description="Match only through a tag (body spells it Wi-Fi)",
        query="wifi",
        expected_doc_ids=["kb_connection_guide"],
    ),
    GoldenQuery(
        id="warranty-001",
        description="Multi-token query matched token by token",
        query="warranty coverage",
        expected_doc_ids=["kb_warranty"],
    ),
    GoldenQuery(
        id="refund-001",
        description="Keyword in title, body and tags",
        query="refund",
        expected_doc_ids=["kb_returns"],
    ),
    GoldenQuery(
        id="voice-001",
        description="Brand name only present in body and tags",
        query="alexa",
        expected_doc_ids=["kb_voice_assistants"],
    ),
    GoldenQuery(
        id="firmware-001",
        description="Phrase query that must outrank a single-token match",
        query="firmware update",
        expected_doc_ids=["kb_firmware_update"],
    ),
]


def get_all_golden_queries() -> list[GoldenQuery]:
    """Get all golden retrieval cases."""
    return list(SUPPORT_QUERIES)


def get_query_by_id(case_id: str) -> GoldenQuery | None:
    """Look up a golden case by id."""
    for case in SUPPORT_QUERIES:
        if case.id == case_id:
            return case
    return None
