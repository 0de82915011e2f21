"""
Tracer factory with a no-op fallback.

Ranking runs on every chat turn, so when tracing is off the retriever must
pay nothing for it. get_tracer() hands out an OTel-backed tracer only when
Phoenix is enabled AND init_phoenix() has installed an SDK TracerProvider;
in every other case callers get NoOpTracer.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol


class SpanProtocol(Protocol):
    """The subset of span operations the retriever and evals use."""

    def set_attribute(self, key: str, value: Any) -> None: ...

    def set_status(self, status: str, description: str | None = None) -> None: ...

    def record_exception(self, exception: BaseException) -> None: ...


class TracerProtocol(Protocol):
    """Anything that can open a span as a context manager."""

    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Any: ...


# ---------------------------------------------------------------------------
# NO-OP
# ---------------------------------------------------------------------------


class NoOpSpan:
    """Span that discards everything."""

    def set_attribute(self, key: str, value: Any) -> None:
        return None

    def set_status(self, status: str, description: str | None = None) -> None:
        return None

    def record_exception(self, exception: BaseException) -> None:
        return None


_NOOP_SPAN = NoOpSpan()


class NoOpTracer:
    """Tracer used when Phoenix is disabled or OTel is not installed."""

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[NoOpSpan]:
        yield _NOOP_SPAN


# ---------------------------------------------------------------------------
# OPENTELEMETRY
# ---------------------------------------------------------------------------


class OTelSpan:
    """Adapts an OTel span to SpanProtocol ("ok"/"error" status strings)."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode

        if status == "ok":
            self._span.set_status(StatusCode.OK)
        else:
            self._span.set_status(StatusCode.ERROR, description)

    def record_exception(self, exception: BaseException) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Adapts an OTel tracer; spans become current so provider calls nest under them."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def _build_tracer(service_name: str) -> TracerProtocol:
    from support_rag.observability.config import get_config

    if not get_config().enabled:
        return NoOpTracer()

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        return NoOpTracer()

    # Still the default proxy provider: init_phoenix() was never called
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()
    return OTelTracer(trace.get_tracer(service_name))


def get_tracer(service_name: str = "support-rag") -> TracerProtocol:
    """Return the process-wide tracer, building it on first use."""
    global _tracer
    if _tracer is None:
        _tracer = _build_tracer(service_name)
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer (tests, shutdown)."""
    global _tracer
    _tracer = None
