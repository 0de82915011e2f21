"""
Unit Tests for LexicalScorer

Keyword scoring is the fallback that must always work, so the weights,
the filtering and the ordering are pinned down here.
"""

import pytest

from support_rag.retrieval.document import Document
from support_rag.retrieval.lexical import LexicalScorer


@pytest.fixture
def scorer():
    return LexicalScorer()


@pytest.fixture
def install_docs():
    return [
        Document(id="doc-install", title="Installation Guide", content="Steps to install the device"),
        Document(id="doc-warranty", title="Warranty", content="Coverage terms"),
    ]


# ---------------------------------------------------------------------------
# SCORING RULES
# ---------------------------------------------------------------------------


class TestScore:
    """Test the additive scoring rule."""

    def test_all_rules_add_up(self, scorer):
        doc = Document(id="1", title="Reset", content="Hold the reset button", tags=["Reset"])
        # title 3.0 + body 2.0 + tag 1.5 + token 0.5
        assert scorer.score("reset", doc) == pytest.approx(7.0)

    def test_case_insensitive(self, scorer):
        doc = Document(id="1", title="WI-FI SETUP", content="")
        assert scorer.score("wi-fi setup", doc) == pytest.approx(3.0 + 0.5 + 0.5)

    def test_tag_substring_match(self, scorer):
        doc = Document(id="1", title="Guide", content="Nothing here", tags=["bluetooth pairing"])
        assert scorer.score("pairing", doc) == pytest.approx(1.5)

    def test_token_overlap_only(self, scorer):
        doc = Document(id="1", title="Troubleshooting", content="Press the reset button")
        assert scorer.score("reset button now", doc) == pytest.approx(1.0)

    def test_single_character_tokens_ignored(self, scorer):
        doc = Document(id="1", title="Other", content="a b c")
        # Full query is in the body (+2.0); "a" and "b" are too short to count
        assert scorer.score("a b", doc) == pytest.approx(2.0)

    def test_token_matches_across_title_and_body(self, scorer):
        doc = Document(id="1", title="Hub", content="reset")
        assert scorer.score("hub reset", doc) == pytest.approx(1.0)

    def test_empty_query_scores_zero(self, scorer):
        doc = Document(id="1", title="Anything", content="Anything", tags=["x"])
        assert scorer.score("", doc) == 0.0

    def test_whitespace_query_scores_zero(self, scorer):
        doc = Document(id="1", title="Two words", content="with spaces")
        assert scorer.score("   ", doc) == 0.0

    def test_exact_title_outranks_missing_title(self, scorer):
        with_title = Document(id="1", title="install", content="same body")
        without_title = Document(id="2", title="unrelated", content="same body")
        assert scorer.score("install", with_title) > scorer.score("install", without_title)


# ---------------------------------------------------------------------------
# RANKING
# ---------------------------------------------------------------------------


class TestRank:
    """Test filtering, ordering and truncation."""

    def test_install_scenario(self, scorer, install_docs):
        scored = scorer.score_documents("install", install_docs)

        assert [item.id for item in scored] == ["doc-install"]
        assert scored[0].score > 0

    def test_rank_returns_documents(self, scorer, install_docs):
        ranked = scorer.rank("install", install_docs)
        assert ranked == [install_docs[0]]

    def test_sorted_by_score_descending(self, scorer):
        docs = [
            Document(id="body", title="x", content="reset here"),
            Document(id="title", title="Reset", content="x"),
            Document(id="both", title="Reset", content="reset"),
        ]
        assert [d.id for d in scorer.rank("reset", docs)] == ["both", "title", "body"]

    def test_ties_preserve_input_order(self, scorer):
        docs = [Document(id=f"d{i}", title="Reset", content="") for i in range(3)]
        assert [d.id for d in scorer.rank("reset", docs)] == ["d0", "d1", "d2"]

    def test_never_more_than_five(self, scorer):
        docs = [Document(id=f"d{i}", title="Reset guide", content="reset") for i in range(20)]
        assert len(scorer.rank("reset", docs)) == 5

    def test_custom_top_k(self):
        docs = [Document(id=f"d{i}", title="Reset", content="") for i in range(5)]
        assert len(LexicalScorer(top_k=2).rank("reset", docs)) == 2

    def test_top_k_above_five_is_capped(self):
        docs = [Document(id=f"d{i}", title="Reset", content="") for i in range(10)]
        scorer = LexicalScorer(top_k=8)

        assert scorer.top_k == 5
        assert len(scorer.rank("reset", docs)) == 5

    def test_document_without_tags(self, scorer):
        doc = Document(id="1", title="Install", content="steps")
        doc.tags = None
        assert scorer.score("install", doc) == pytest.approx(3.0 + 0.5)

    def test_empty_query_and_documents(self, scorer):
        assert scorer.rank("", []) == []

    def test_empty_query_returns_nothing(self, scorer, install_docs):
        assert scorer.rank("", install_docs) == []

    def test_no_match_returns_empty(self, scorer, install_docs):
        assert scorer.rank("bluetooth", install_docs) == []

    def test_deterministic(self, scorer, install_docs):
        first = scorer.score_documents("install guide", install_docs)
        second = scorer.score_documents("install guide", install_docs)
        assert [(s.id, s.score) for s in first] == [(s.id, s.score) for s in second]

    def test_does_not_mutate_input(self, scorer, install_docs):
        original = list(install_docs)
        scorer.rank("install", install_docs)
        assert install_docs == original
