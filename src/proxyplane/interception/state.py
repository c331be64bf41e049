"""Per-proxy runtime state and storage synchronization.

A proxy owns exactly one ``ProxyRuntimeState``, kept in a ``__slots__``
entry of the generated class so it never lands in the shared ``__dict__``.
The proxy's ``__dict__`` *is* the wrapped instance's ``__dict__``: both
objects read and write the same mapping, so every dict-backed attribute is
synchronized in both directions without copying. Slot-backed attributes are
forwarded by accessors the builder generates.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from proxyplane.core.errors import InternalError, UnknownMemberError

PROXY_STATE_SLOT = "__proxy_state__"

Hook = Callable[..., Any]


@dataclass(slots=True)
class ProxyRuntimeState:
    """Mutable state of one live proxy."""

    wrapped: Any
    prefix_interceptors: dict[str, Hook] = field(default_factory=dict)
    suffix_interceptors: dict[str, Hook] = field(default_factory=dict)
    type_id: str = ""
    known_methods: frozenset[str] = frozenset()
    strict: bool = False
    # Set while the implicit __init__ after direct instantiation is pending.
    skip_init: bool = False

    def _check(self, method: str) -> None:
        if self.strict and method not in self.known_methods:
            raise UnknownMemberError.for_method(self.type_id, method)

    def set_prefix(self, method: str, hook: Hook | None) -> None:
        self._check(method)
        if hook is None:
            self.prefix_interceptors.pop(method, None)
        else:
            self.prefix_interceptors[method] = hook

    def set_suffix(self, method: str, hook: Hook | None) -> None:
        self._check(method)
        if hook is None:
            self.suffix_interceptors.pop(method, None)
        else:
            self.suffix_interceptors[method] = hook

    def register(
        self,
        prefix: Mapping[str, Hook] | None,
        suffix: Mapping[str, Hook] | None,
    ) -> None:
        for method, hook in (prefix or {}).items():
            self.set_prefix(method, hook)
        for method, hook in (suffix or {}).items():
            self.set_suffix(method, hook)

    def rebind(self, wrapped: Any) -> ProxyRuntimeState:
        """Same hooks and settings, different wrapped instance."""
        return ProxyRuntimeState(
            wrapped=wrapped,
            prefix_interceptors=dict(self.prefix_interceptors),
            suffix_interceptors=dict(self.suffix_interceptors),
            type_id=self.type_id,
            known_methods=self.known_methods,
            strict=self.strict,
        )


def state_of(proxy: Any) -> ProxyRuntimeState:
    """Runtime state of ``proxy``.

    Raises:
        InternalError: the proxy was allocated without being attached to a
            wrapped instance, e.g. by ``object.__new__``.
    """
    try:
        return object.__getattribute__(proxy, PROXY_STATE_SLOT)  # type: ignore[no-any-return]
    except AttributeError:
        raise InternalError.unexpected(
            "proxy has no runtime state", proxy_class=type(proxy).__qualname__
        ) from None


def attach(proxy: Any, state: ProxyRuntimeState) -> None:
    """Bind ``state`` to ``proxy`` and alias the wrapped instance's storage."""
    object.__setattr__(proxy, PROXY_STATE_SLOT, state)
    if type(state.wrapped).__dictoffset__ and type(proxy).__dictoffset__:
        object.__setattr__(proxy, "__dict__", object.__getattribute__(state.wrapped, "__dict__"))


def clone(proxy: Any, memo: dict[int, Any] | None = None) -> Any:
    """Independent proxy over a deep copy of the wrapped instance."""
    state = state_of(proxy)
    duplicate = object.__new__(type(proxy))
    if memo is not None:
        memo[id(proxy)] = duplicate
    attach(duplicate, state.rebind(copy.deepcopy(state.wrapped, memo)))
    return duplicate
