"""
Retrieval Quality Eval

Checks that the retriever picks the RIGHT knowledge entries for a set of
golden support questions before any of them reach the chat model.

WHY RETRIEVAL QUALITY MATTERS:
------------------------------
If the wrong entries are stuffed into the prompt, even a perfect model
answers from the wrong manual page. This gate catches:
- Scoring weight changes that reorder results
- Threshold changes that drop relevant entries
- Embedding model swaps that break similarity

METRICS:
--------
RECALL:    |retrieved ∩ expected| / |expected|
PRECISION: |retrieved ∩ expected| / |retrieved|
F1:        2 * (precision * recall) / (precision + recall)

A case passes when recall >= min_recall AND the top-ranked document is one
of the expected ones (the model reads item 1 first).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from support_rag.golden_sets import GoldenQuery, get_all_golden_queries
from support_rag.observability.attributes import eval_gate_attributes
from support_rag.observability.tracer import get_tracer
from support_rag.retrieval.seeds import get_product_documents

if TYPE_CHECKING:
    from support_rag.retrieval.document import Document
    from support_rag.retrieval.retriever import KnowledgeRetriever

logger = logging.getLogger(__name__)

DEFAULT_MIN_RECALL = 0.5


# ---------------------------------------------------------------------------
# RETRIEVAL EVALUATION
# ---------------------------------------------------------------------------


@dataclass
class RetrievalMetrics:
    """Retrieval quality metrics for a single case."""
    recall: float
    precision: float
    f1_score: float
    retrieved_docs: list[str]
    expected_docs: list[str]
    missing_docs: list[str]
    extra_docs: list[str]


@dataclass
class RetrievalEvalResult:
    """Result of retrieval eval for a single case."""
    case_id: str
    query: str
    passed: bool
    strategy: str
    metrics: RetrievalMetrics


@dataclass
class RetrievalEvalReport:
    """Aggregate retrieval eval results."""
    total_cases: int
    passed_cases: int
    failed_cases: int
    avg_recall: float
    avg_precision: float
    avg_f1: float
    min_recall: float
    results: list[RetrievalEvalResult]

    @property
    def all_passed(self) -> bool:
        return self.failed_cases == 0

    @property
    def pass_rate(self) -> float:
        if self.total_cases == 0:
            return 0.0
        return self.passed_cases / self.total_cases


def calculate_retrieval_metrics(
    retrieved: list[str],
    expected: list[str],
) -> RetrievalMetrics:
    """Calculate recall, precision and F1 for one case."""
    retrieved_set = set(retrieved)
    expected_set = set(expected)

    if not expected_set:
        # Nothing should be retrieved; anything that was is noise
        return RetrievalMetrics(
            recall=1.0,
            precision=1.0 if not retrieved_set else 0.0,
            f1_score=1.0 if not retrieved_set else 0.0,
            retrieved_docs=retrieved,
            expected_docs=expected,
            missing_docs=[],
            extra_docs=sorted(retrieved_set),
        )

    overlap = retrieved_set & expected_set
    recall = len(overlap) / len(expected_set)
    precision = len(overlap) / len(retrieved_set) if retrieved_set else 0.0
    if precision + recall > 0:
        f1 = 2 * (precision * recall) / (precision + recall)
    else:
        f1 = 0.0

    return RetrievalMetrics(
        recall=recall,
        precision=precision,
        f1_score=f1,
        retrieved_docs=retrieved,
        expected_docs=expected,
        missing_docs=sorted(expected_set - retrieved_set),
        extra_docs=sorted(retrieved_set - expected_set),
    )


def run_retrieval_eval(
    retriever: KnowledgeRetriever | None = None,
    cases: list[GoldenQuery] | None = None,
    documents: list[Document] | None = None,
    min_recall: float = DEFAULT_MIN_RECALL,
    verbose: bool = False,
) -> RetrievalEvalReport:
    """
    Run retrieval eval on golden queries.

    Args:
        retriever: Retriever under test. Defaults to a lexical-only retriever
                   (deterministic, no network).
        cases: Cases to evaluate. Defaults to all golden queries.
        documents: Knowledge base. Defaults to the seed product documents.
        min_recall: Minimum recall for a case to pass.
        verbose: Print progress.
    """
    if retriever is None:
        from support_rag.config import RetrievalConfig
        from support_rag.retrieval.retriever import create_retriever

        retriever = create_retriever(config=RetrievalConfig(), lexical_only=True)

    cases = cases if cases is not None else get_all_golden_queries()
    documents = documents if documents is not None else get_product_documents()
    results: list[RetrievalEvalResult] = []

    tracer = get_tracer()
    with tracer.start_span("eval.retrieval") as span:
        for case in cases:
            if verbose:
                print(f"Running retrieval eval: {case.id}...")

            ranking = retriever.rank_with_scores(case.query, documents)
            metrics = calculate_retrieval_metrics(ranking.ids, case.expected_doc_ids)

            top_ok = (
                not case.expected_doc_ids
                or (bool(ranking.ids) and ranking.ids[0] in case.expected_doc_ids)
            )
            passed = metrics.recall >= min_recall and top_ok

            if not passed:
                logger.info(
                    "Retrieval case %s failed: retrieved=%s expected=%s",
                    case.id,
                    ranking.ids,
                    case.expected_doc_ids,
                )

            results.append(RetrievalEvalResult(
                case_id=case.id,
                query=case.query,
                passed=passed,
                strategy=ranking.strategy,
                metrics=metrics,
            ))

        if results:
            avg_recall = sum(r.metrics.recall for r in results) / len(results)
            avg_precision = sum(r.metrics.precision for r in results) / len(results)
            avg_f1 = sum(r.metrics.f1_score for r in results) / len(results)
            passed_count = sum(1 for r in results if r.passed)
        else:
            avg_recall = avg_precision = avg_f1 = 0.0
            passed_count = 0

        report = RetrievalEvalReport(
            total_cases=len(results),
            passed_cases=passed_count,
            failed_cases=len(results) - passed_count,
            avg_recall=avg_recall,
            avg_precision=avg_precision,
            avg_f1=avg_f1,
            min_recall=min_recall,
            results=results,
        )

        for key, value in eval_gate_attributes(
            "retrieval_quality",
            "passed" if report.all_passed else "failed",
            score=report.avg_f1,
        ).items():
            span.set_attribute(key, value)

    return report
