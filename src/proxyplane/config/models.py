"""Typed configuration sections.

Each section maps to a ``PROXYPLANE__<SECTION>__<KEY>`` environment prefix
and to a top-level key in the YAML files read by ``config.loader``.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_STREAMS = frozenset({"stderr", "stdout"})


class LogOutputConfig(BaseModel):
    """One log sink. Only settable from YAML, since it lives in a list."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"
    level: LogLevel | None = None  # None: use LoggingConfig.level

    @field_validator("destination")
    @classmethod
    def _stream_or_absolute_file(cls, value: str) -> str:
        if value in _STREAMS:
            return value
        expanded = Path(value).expanduser()
        if expanded.is_absolute():
            return str(expanded)
        raise ValueError(f"log destination must be stderr, stdout or an absolute path, got {value!r}")


class LoggingConfig(BaseModel):
    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every intercepted call.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ProxyConfig(BaseModel):
    """Proxy construction and interception switches.

    ``PROXYPLANE__PROXY__STRICT=true`` turns on strict mode from the shell.
    """

    strict: bool = Field(
        default=False,
        description="Raise UnknownMemberError when a hook names a method the "
        "proxied class does not declare. Off by default: unknown hooks are ignored.",
    )
    cache_types: bool = Field(
        default=True,
        description="Build each proxy class once per target class. "
        "Disable only to debug class generation.",
    )
    intercept_dunder_methods: bool = Field(
        default=True,
        description="Intercept user-defined special methods such as __len__ or __call__. "
        "Lifecycle and attribute-protocol dunders are never intercepted.",
    )


class ProxyPlaneConfig(BaseModel):
    """Effective configuration as returned by ``load_config``."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
