"""Config module exports."""

from proxyplane.config.loader import ProxyPlaneSettings, load_config
from proxyplane.config.models import (
    LoggingConfig,
    LogOutputConfig,
    ProxyConfig,
    ProxyPlaneConfig,
)

__all__ = [
    "load_config",
    "ProxyPlaneConfig",
    "ProxyPlaneSettings",
    "ProxyConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
