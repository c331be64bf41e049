"""structlog setup for proxyplane.

Events go through stdlib ``logging`` handlers, one per configured output,
each rendered as JSON or as console text at its own level. While a proxy
class is being built the proxied type is held in a context variable and
stamped onto every event as ``proxy_type``.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from proxyplane.config.models import LoggingConfig, LogOutputConfig

_proxy_type: ContextVar[str | None] = ContextVar("proxy_type", default=None)


def get_proxy_type() -> str | None:
    return _proxy_type.get()


def bind_proxy_type(type_id: str) -> None:
    """Stamp ``type_id`` on events logged from the current context."""
    _proxy_type.set(type_id)


def clear_proxy_type() -> None:
    _proxy_type.set(None)


def _add_proxy_type(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    type_id = get_proxy_type()
    if type_id:
        event_dict.setdefault("proxy_type", type_id)
    return event_dict


def _level_number(name: str, fallback: int = logging.INFO) -> int:
    name = name.upper()
    if name == "WARN":
        name = "WARNING"
    number = logging.getLevelName(name)
    return number if isinstance(number, int) else fallback


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_proxy_type,  # type: ignore[list-item]
    ]


def _output_handler(
    output: LogOutputConfig,
    processors: list[structlog.types.Processor],
    level: int,
) -> logging.Handler:
    stream = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    handler: logging.Handler
    if stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        target = Path(output.destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        colors = stream is not None and stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )
    handler.setLevel(level)
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib handlers.

    With ``config`` every entry of ``config.outputs`` gets a handler.
    Without it a single stderr output is built from ``level`` and
    ``json_format``. Calling again replaces the previous handlers.
    """
    from proxyplane.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level_number(config.level)
    processors = _shared_processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # reconfiguration must reach loggers created earlier
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        if isinstance(old, logging.FileHandler):
            old.close()
    root.setLevel(root_level)

    for output in config.outputs:
        output_level = _level_number(output.level or config.level, root_level)
        root.addHandler(_output_handler(output, processors, output_level))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]
