"""Artifact builders: turn a structural model into a proxy class.

The default ``ScopeLocalizerBuilder`` creates a subclass of the target
with ``type()``. Generated classes:

- override every interceptable method with a function that routes the call
  through ``dispatch``;
- alias the wrapped instance's ``__dict__`` and forward slot-backed
  properties to the wrapped instance;
- refuse ``del proxy.attr``;
- clone through ``copy``/``deepcopy`` and pickle as their wrapped instance;
- expose the construction entry point and hook registration methods named
  by the ``DispatchContract``.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from proxyplane.core.errors import UnsupportedOperationError, UnsupportedTargetError
from proxyplane.interception.dispatcher import dispatch
from proxyplane.interception.state import (
    PROXY_STATE_SLOT,
    Hook,
    ProxyRuntimeState,
    attach,
    clone,
    state_of,
)
from proxyplane.introspection.members import PROXY_MARKER
from proxyplane.introspection.model import MethodDescriptor, PropertyDescriptor, Storage
from proxyplane.introspection.structure import StructuralModel

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchContract:
    """Names and switches every built proxy class must honour."""

    constructor: str = "proxy_constructor"
    set_prefix: str = "set_method_prefix_interceptor"
    set_suffix: str = "set_method_suffix_interceptor"
    intercept_dunder_methods: bool = True
    strict: bool = False


class ArtifactBuilder(Protocol):
    def build(self, model: StructuralModel, contract: DispatchContract) -> type: ...


def _interceptor(method: MethodDescriptor, original: Any) -> Any:
    name = method.name
    signature = method.signature
    returns_void = method.returns_void

    def intercepted(self: Any, *args: Any, **kwargs: Any) -> Any:
        return dispatch(
            self, state_of(self), name, signature, args, kwargs, returns_void=returns_void
        )

    if not callable(original):
        # partialmethod and singledispatchmethod keep the function in ``func``.
        original = getattr(original, "func", original)
    functools.update_wrapper(intercepted, original)
    intercepted.__name__ = name
    return intercepted


def _slot_forwarder(prop: PropertyDescriptor, slot: Any) -> property:
    def fget(self: Any) -> Any:
        wrapped = state_of(self).wrapped
        return slot.__get__(wrapped, type(wrapped))

    def fset(self: Any, value: Any) -> None:
        slot.__set__(state_of(self).wrapped, value)

    return property(fget, fset, doc=f"Forwarded slot {prop.storage_name!r}")


def _restore(wrapped: Any) -> Any:
    from proxyplane.factory import restore_proxy

    return restore_proxy(wrapped)


class ScopeLocalizerBuilder:
    """Builds proxy subclasses that share storage with their wrapped instance."""

    def build(self, model: StructuralModel, contract: DispatchContract) -> type:
        target = model.target
        namespace: dict[str, Any] = {
            "__slots__": (PROXY_STATE_SLOT,),
            "__module__": target.__module__,
            "__qualname__": f"{target.__qualname__}Proxy",
            "__doc__": target.__doc__,
            PROXY_MARKER: target,
        }

        methods = model.interceptable_methods(include_dunder=contract.intercept_dunder_methods)
        for method in methods:
            original = inspect.getattr_static(target, method.name)
            namespace[method.name] = _interceptor(method, original)

        # Defining __eq__ alone would reset the inherited __hash__ to None.
        if "__eq__" in namespace and "__hash__" not in namespace:
            namespace["__hash__"] = target.__hash__

        for prop in model.properties.only_non_referenceable_properties():
            if prop.storage is Storage.SLOT:
                slot = inspect.getattr_static(target, prop.storage_name)
                namespace[prop.storage_name] = _slot_forwarder(prop, slot)

        namespace.update(
            self._lifecycle(model, contract, frozenset(m.name for m in methods))
        )

        try:
            proxy_cls: type = type(target)(f"{target.__name__}Proxy", (target,), namespace)
        except TypeError as e:
            raise UnsupportedTargetError.excluded(model.type_id, str(e)) from e

        log.debug("builder.class_built", target=model.type_id, intercepted=len(methods))
        return proxy_cls

    @staticmethod
    def _lifecycle(
        model: StructuralModel, contract: DispatchContract, known: frozenset[str]
    ) -> dict[str, Any]:
        target = model.target
        type_id = model.type_id

        def new_state(wrapped: Any) -> ProxyRuntimeState:
            return ProxyRuntimeState(
                wrapped=wrapped, type_id=type_id, known_methods=known, strict=contract.strict
            )

        def proxy_constructor(
            cls: type,
            instance: Any,
            prefix_interceptors: Mapping[str, Hook] | None = None,
            suffix_interceptors: Mapping[str, Hook] | None = None,
        ) -> Any:
            """Wrap ``instance``. The only way to obtain a proxy for an existing object."""
            if type(instance) is not target:
                raise UnsupportedTargetError.excluded(
                    type_id, f"cannot wrap an instance of {type(instance).__qualname__}"
                )
            state = new_state(instance)
            state.register(prefix_interceptors, suffix_interceptors)
            proxy = object.__new__(cls)
            attach(proxy, state)
            return proxy

        def __new__(cls: type, *args: Any, **kwargs: Any) -> Any:
            # Direct instantiation builds a fresh target instance to wrap.
            proxy = object.__new__(cls)
            state = new_state(target(*args, **kwargs))
            state.skip_init = True
            attach(proxy, state)
            return proxy

        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            state = state_of(self)
            if state.skip_init:
                state.skip_init = False
                return
            type(state.wrapped).__init__(state.wrapped, *args, **kwargs)

        def __delattr__(self: Any, name: str) -> None:
            raise UnsupportedOperationError.unset(type_id, name)

        def __copy__(self: Any) -> Any:
            return clone(self)

        def __deepcopy__(self: Any, memo: dict[int, Any]) -> Any:
            return clone(self, memo)

        def __reduce_ex__(self: Any, protocol: Any) -> tuple[Any, ...]:
            # Hooks are behaviour, not data: only the wrapped instance is persisted.
            return (_restore, (state_of(self).wrapped,))

        def set_prefix(self: Any, method: str, hook: Hook | None) -> None:
            state_of(self).set_prefix(method, hook)

        def set_suffix(self: Any, method: str, hook: Hook | None) -> None:
            state_of(self).set_suffix(method, hook)

        return {
            contract.constructor: classmethod(proxy_constructor),
            "__new__": __new__,
            "__init__": __init__,
            "__delattr__": __delattr__,
            "__copy__": __copy__,
            "__deepcopy__": __deepcopy__,
            "__reduce_ex__": __reduce_ex__,
            contract.set_prefix: set_prefix,
            contract.set_suffix: set_suffix,
        }
