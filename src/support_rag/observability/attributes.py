"""
Semantic Conventions for Span Attributes

Defines attribute keys following OpenTelemetry GenAI conventions
plus a custom namespace for retrieval.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_SYSTEM = "gen_ai.system"  # "zhipu", "openai", "mock"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"  # "embedding-3"


# ---------------------------------------------------------------------------
# RETRIEVAL NAMESPACE (custom)
# ---------------------------------------------------------------------------

RETRIEVAL_QUERY = "retrieval.query"  # only when PHOENIX_CAPTURE_CONTENT=true
RETRIEVAL_STRATEGY = "retrieval.strategy"  # "embedding", "lexical"
RETRIEVAL_CANDIDATE_COUNT = "retrieval.candidate_count"
RETRIEVAL_RESULT_COUNT = "retrieval.result_count"
RETRIEVAL_RESULT_IDS = "retrieval.result_ids"
RETRIEVAL_TOP_SCORE = "retrieval.top_score"
RETRIEVAL_THRESHOLD = "retrieval.threshold"
RETRIEVAL_FALLBACK = "retrieval.fallback"  # bool
RETRIEVAL_FALLBACK_REASON = "retrieval.fallback_reason"
RETRIEVAL_LATENCY_MS = "retrieval.latency_ms"

# Eval
EVAL_GATE_NAME = "eval.gate.name"
EVAL_GATE_STATUS = "eval.gate.status"  # "passed", "failed"
EVAL_GATE_SCORE = "eval.gate.score"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def ranking_attributes(
    strategy: str,
    candidate_count: int,
    result_ids: list[str],
    latency_ms: float,
    top_score: float | None = None,
    fallback_reason: str | None = None,
) -> dict:
    """Create attributes dict for a ranking span."""
    attrs = {
        RETRIEVAL_STRATEGY: strategy,
        RETRIEVAL_CANDIDATE_COUNT: candidate_count,
        RETRIEVAL_RESULT_COUNT: len(result_ids),
        RETRIEVAL_RESULT_IDS: list(result_ids),
        RETRIEVAL_LATENCY_MS: latency_ms,
        RETRIEVAL_FALLBACK: fallback_reason is not None,
    }
    if top_score is not None:
        attrs[RETRIEVAL_TOP_SCORE] = top_score
    if fallback_reason:
        attrs[RETRIEVAL_FALLBACK_REASON] = fallback_reason
    return attrs


def eval_gate_attributes(
    gate_name: str,
    status: str,
    score: float | None = None,
) -> dict:
    """Create attributes dict for an eval gate span."""
    attrs = {
        EVAL_GATE_NAME: gate_name,
        EVAL_GATE_STATUS: status,
    }
    if score is not None:
        attrs[EVAL_GATE_SCORE] = score
    return attrs
