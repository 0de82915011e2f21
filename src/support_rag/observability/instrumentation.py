"""
OpenInference auto-instrumentation for the openai SDK.

ZhipuEmbeddings talks to Zhipu through the openai client, so instrumenting
that client is enough to get one child span per embedding request.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_instrumentor = None


def register_instrumentors() -> bool:
    """Instrument the openai SDK once. Returns False if unavailable."""
    global _instrumentor
    if _instrumentor is not None:
        return True

    try:
        from openinference.instrumentation.openai import OpenAIInstrumentor
    except ImportError:
        logger.debug("openinference-instrumentation-openai not installed")
        return False

    instrumentor = OpenAIInstrumentor()
    try:
        instrumentor.instrument()
    except Exception as e:
        logger.warning("Failed to instrument openai: %s", e)
        return False

    _instrumentor = instrumentor
    logger.info("Instrumented openai SDK")
    return True


def uninstrument() -> None:
    """Undo register_instrumentors()."""
    global _instrumentor
    if _instrumentor is None:
        return
    _instrumentor.uninstrument()
    _instrumentor = None
