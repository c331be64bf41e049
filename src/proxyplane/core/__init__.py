"""Core module exports."""

from proxyplane.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    InvariantViolationError,
    ProxyPlaneError,
    UnknownMemberError,
    UnsupportedOperationError,
    UnsupportedTargetError,
)
from proxyplane.core.logging import (
    bind_proxy_type,
    clear_proxy_type,
    configure_logging,
    get_logger,
    get_proxy_type,
)

__all__ = [
    # Errors
    "ProxyPlaneError",
    "ErrorCode",
    "ConfigError",
    "InternalError",
    "InvariantViolationError",
    "UnknownMemberError",
    "UnsupportedOperationError",
    "UnsupportedTargetError",
    # Logging
    "bind_proxy_type",
    "clear_proxy_type",
    "configure_logging",
    "get_logger",
    "get_proxy_type",
]
