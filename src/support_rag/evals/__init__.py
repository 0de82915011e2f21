"""
Evaluation gates for the retrieval engine.
"""

from support_rag.evals.retrieval_eval import (
    RetrievalMetrics,
    RetrievalEvalResult,
    RetrievalEvalReport,
    calculate_retrieval_metrics,
    run_retrieval_eval,
)

__all__ = [
    "RetrievalMetrics",
    "RetrievalEvalResult",
    "RetrievalEvalReport",
    "calculate_retrieval_metrics",
    "run_retrieval_eval",
]
