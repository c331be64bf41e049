"""Interception dispatcher: the protocol every intercepted call runs through.

    Start -> PrefixPhase -> {ShortCircuit | RealCall} -> SuffixPhase -> Done

Prefix hooks are called as::

    hook(proxy, instance, method, params, return_early) -> value

and suffix hooks as::

    hook(proxy, instance, method, params, return_value, return_early) -> value

``params`` is an ordered snapshot of the bound arguments, defaults applied.
``return_early`` is a ``Ref[bool]``; a hook that sets ``return_early.value``
makes its own return value the result of the call. A prefix short-circuit
skips the real method and the suffix hook. Methods declared ``-> None``
always produce ``None``.

Exceptions raised by hooks or by the real method propagate unchanged.
The dispatcher keeps no state outside a single call, so hooks may call
back into the proxy.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from proxyplane.interception.ref import Ref
from proxyplane.interception.state import ProxyRuntimeState
from proxyplane.introspection.model import is_dunder

log = structlog.get_logger(__name__)


@dataclass(slots=True)
class InterceptionOutcome:
    short_circuited: bool = False
    value: Any = None


def snapshot_arguments(
    signature: inspect.Signature | None,
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
) -> dict[str, Any]:
    """Bind call arguments to parameter names, in declaration order.

    Raises:
        TypeError: the arguments do not fit the signature, exactly as the
            unproxied call would.
    """
    if signature is None:
        return {"args": args, "kwargs": dict(kwargs)}
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def run_prefix(
    state: ProxyRuntimeState,
    proxy: Any,
    method: str,
    params: dict[str, Any],
) -> InterceptionOutcome:
    hook = state.prefix_interceptors.get(method)
    if hook is None:
        return InterceptionOutcome()
    return_early: Ref[bool] = Ref(False)
    value = hook(proxy, state.wrapped, method, params, return_early)
    return InterceptionOutcome(bool(return_early.value), value)


def run_suffix(
    state: ProxyRuntimeState,
    proxy: Any,
    method: str,
    params: dict[str, Any],
    result: Any,
) -> InterceptionOutcome:
    hook = state.suffix_interceptors.get(method)
    if hook is None:
        return InterceptionOutcome()
    return_early: Ref[bool] = Ref(False)
    value = hook(proxy, state.wrapped, method, params, result, return_early)
    return InterceptionOutcome(bool(return_early.value), value)


def call_wrapped(wrapped: Any, method: str, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> Any:
    """Invoke the real method with the caller's own argument objects."""
    if is_dunder(method):
        # Special methods are looked up on the type, as the interpreter does.
        return getattr(type(wrapped), method)(wrapped, *args, **kwargs)
    return getattr(wrapped, method)(*args, **kwargs)


def dispatch(
    proxy: Any,
    state: ProxyRuntimeState,
    method: str,
    signature: inspect.Signature | None,
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
    *,
    returns_void: bool = False,
) -> Any:
    params = snapshot_arguments(signature, args, kwargs)
    log.debug("dispatch.call", method=method, proxy_type=state.type_id)

    outcome = run_prefix(state, proxy, method, params)
    if outcome.short_circuited:
        log.debug("dispatch.short_circuit", method=method, phase="prefix")
        return None if returns_void else outcome.value

    result = call_wrapped(state.wrapped, method, args, kwargs)

    outcome = run_suffix(state, proxy, method, params, result)
    if outcome.short_circuited:
        log.debug("dispatch.short_circuit", method=method, phase="suffix")
        result = outcome.value

    return None if returns_void else result
