"""
Tracing settings, read from the environment once and cached.
"""

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


def _flag(name: str) -> bool:
    return os.environ.get(name, "false").lower() in _TRUTHY


@dataclass
class PhoenixConfig:
    """Phoenix / OTLP export settings.

    Environment Variables:
        PHOENIX_ENABLED: Turn tracing on (default: false)
        PHOENIX_PROJECT_NAME: Project shown in the Phoenix UI (default: support-rag)
        PHOENIX_COLLECTOR_ENDPOINT: OTLP endpoint; a local Phoenix app is launched when unset
        PHOENIX_CAPTURE_CONTENT: Put end-user questions on spans (default: false)

    Chat-widget questions can carry order numbers, addresses and other
    personal details. Leave PHOENIX_CAPTURE_CONTENT off unless the collector
    is allowed to store them.
    """

    enabled: bool = False
    project_name: str = "support-rag"
    collector_endpoint: str | None = None
    capture_content: bool = False

    @classmethod
    def from_env(cls) -> "PhoenixConfig":
        return cls(
            enabled=_flag("PHOENIX_ENABLED"),
            project_name=os.environ.get("PHOENIX_PROJECT_NAME", "support-rag"),
            collector_endpoint=os.environ.get("PHOENIX_COLLECTOR_ENDPOINT") or None,
            capture_content=_flag("PHOENIX_CAPTURE_CONTENT"),
        )


_config: PhoenixConfig | None = None


def get_config() -> PhoenixConfig:
    """Process-wide config, loaded on first call."""
    global _config
    if _config is None:
        _config = PhoenixConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the env."""
    global _config
    _config = None
