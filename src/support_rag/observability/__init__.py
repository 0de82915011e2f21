"""
Observability - Phoenix tracing for ranking calls and embedding requests.

Off by default. With PHOENIX_ENABLED=true and the `observability` extra
installed, init_phoenix() exports spans over OTLP (to a remote collector or
a local Phoenix app) and auto-instruments the openai SDK, so each embedding
request shows up under its "retrieval.rank" span.

    from support_rag.observability import init_phoenix, get_tracer

    init_phoenix()
    with get_tracer().start_span("retrieval.rank") as span:
        span.set_attribute("retrieval.strategy", "lexical")
"""

from __future__ import annotations

import logging

from support_rag.observability.attributes import (
    GEN_AI_REQUEST_MODEL,
    GEN_AI_SYSTEM,
    RETRIEVAL_FALLBACK,
    RETRIEVAL_QUERY,
    RETRIEVAL_RESULT_COUNT,
    RETRIEVAL_STRATEGY,
    eval_gate_attributes,
    ranking_attributes,
)
from support_rag.observability.config import PhoenixConfig, get_config, reset_config
from support_rag.observability.tracer import (
    NoOpSpan,
    NoOpTracer,
    SpanProtocol,
    TracerProtocol,
    get_tracer,
    reset_tracer,
)

logger = logging.getLogger(__name__)

_initialized = False


def _otlp_endpoint(config: PhoenixConfig) -> str:
    if config.collector_endpoint:
        return config.collector_endpoint

    import phoenix as px

    session = px.launch_app()
    logger.info("Phoenix UI available at %s", session.url)
    return f"{session.url.rstrip('/')}/v1/traces"


def init_phoenix(config: PhoenixConfig | None = None) -> bool:
    """
    Install an OTLP-exporting TracerProvider and the OpenAI instrumentor.

    Safe to call more than once. Returns True when tracing is live, False
    when disabled, when the extra is not installed, or on setup failure.
    """
    global _initialized
    if _initialized:
        return True

    config = config or get_config()
    if not config.enabled:
        logger.debug("Phoenix tracing disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        endpoint = _otlp_endpoint(config)
        provider = TracerProvider(
            resource=Resource.create({"openinference.project.name": config.project_name})
        )
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
        logger.info("Exporting traces to %s", endpoint)
    except ImportError as e:
        logger.warning("Phoenix extra not installed, tracing disabled: %s", e)
        return False
    except Exception as e:
        logger.error("Failed to initialize Phoenix: %s", e)
        return False

    from support_rag.observability.instrumentation import register_instrumentors

    register_instrumentors()
    reset_tracer()
    _initialized = True
    return True


def shutdown_phoenix() -> None:
    """Flush pending spans and drop cached tracer/config."""
    global _initialized
    if not _initialized:
        return

    try:
        from opentelemetry import trace

        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception as e:
        logger.warning("Error shutting down tracer provider: %s", e)

    from support_rag.observability.instrumentation import uninstrument

    uninstrument()
    reset_tracer()
    reset_config()
    _initialized = False


__all__ = [
    "init_phoenix",
    "shutdown_phoenix",
    "PhoenixConfig",
    "get_config",
    "reset_config",
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    "GEN_AI_SYSTEM",
    "GEN_AI_REQUEST_MODEL",
    "RETRIEVAL_QUERY",
    "RETRIEVAL_STRATEGY",
    "RETRIEVAL_FALLBACK",
    "RETRIEVAL_RESULT_COUNT",
    "ranking_attributes",
    "eval_gate_attributes",
]
