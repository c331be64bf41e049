"""Structural model: the classified description of one target class."""

from __future__ import annotations

import functools
import inspect
import typing
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

import structlog

from proxyplane.interception.ref import Ref
from proxyplane.introspection.members import RawMemberSet, RawMethod, introspect
from proxyplane.introspection.model import (
    MethodDescriptor,
    ParameterDescriptor,
    PropertyKey,
    TypeId,
    Visibility,
    classify_name,
    is_dunder,
    type_id_of,
)
from proxyplane.introspection.properties import Properties

log = structlog.get_logger(__name__)

# Never routed through hooks: object lifecycle, attribute lookup and the
# copy/pickle protocol that the proxy implements itself.
RESERVED_METHODS = frozenset(
    {
        "__new__",
        "__init__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__set_name__",
        "__getattribute__",
        "__delattr__",
        "__dir__",
        "__del__",
        "__copy__",
        "__deepcopy__",
        "__reduce__",
        "__reduce_ex__",
        "__getstate__",
        "__setstate__",
        "__getnewargs__",
        "__getnewargs_ex__",
    }
)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _is_ref(annotation: Any) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head.rsplit(".", 1)[-1] == "Ref"
    return annotation is Ref or typing.get_origin(annotation) is Ref


def _is_void(annotation: Any) -> bool:
    return annotation is None or annotation is type(None) or annotation == "None"


_OPAQUE_SIGNATURE = inspect.Signature(
    [
        inspect.Parameter("args", inspect.Parameter.VAR_POSITIONAL),
        inspect.Parameter("kwargs", inspect.Parameter.VAR_KEYWORD),
    ]
)


def _bound_signature(raw: RawMethod) -> inspect.Signature:
    function = raw.function
    try:
        if isinstance(function, functools.partialmethod):
            # None stands in for self; the stored arguments follow it.
            return inspect.signature(
                functools.partial(function.func, None, *function.args, **function.keywords)
            )
        if isinstance(function, functools.singledispatchmethod):
            function = function.func
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return _OPAQUE_SIGNATURE
    params = list(signature.parameters.values())
    if params and params[0].kind in _POSITIONAL:
        params = params[1:]
    return signature.replace(parameters=params)


def describe_method(raw: RawMethod) -> MethodDescriptor:
    visibility, _ = classify_name(raw.declaring, raw.name)
    signature = _bound_signature(raw)
    parameters = tuple(
        ParameterDescriptor(
            name=p.name,
            by_reference=p.annotation is not inspect.Parameter.empty and _is_ref(p.annotation),
            variadic=p.kind in _VARIADIC,
            kind=p.kind.name,
            has_default=p.default is not inspect.Parameter.empty,
        )
        for p in signature.parameters.values()
    )
    interceptable = (
        visibility is not Visibility.PRIVATE
        and not raw.abstract
        and raw.name not in RESERVED_METHODS
    )
    return MethodDescriptor(
        name=raw.name,
        declaring_type=type_id_of(raw.declaring),
        visibility=visibility,
        parameters=parameters,
        returns_void=_is_void(signature.return_annotation),
        interceptable=interceptable,
        signature=signature,
    )


@dataclass(frozen=True, slots=True)
class StructuralModel:
    """Immutable description of one target class.

    Built once per class and handed to an artifact builder. Narrowing
    operations return new models; ``methods`` is carried over unchanged.
    """

    type_id: TypeId
    target: type
    properties: Properties
    methods: tuple[MethodDescriptor, ...]

    @classmethod
    def from_raw(cls, raw: RawMemberSet) -> StructuralModel:
        return cls(
            type_id=raw.type_id,
            target=raw.target,
            properties=Properties.from_raw(raw.properties, raw.type_id),
            methods=tuple(describe_method(m) for m in raw.methods),
        )

    def method(self, name: str) -> MethodDescriptor | None:
        for m in self.methods:
            if m.name == name:
                return m
        return None

    def interceptable_methods(self, *, include_dunder: bool = True) -> tuple[MethodDescriptor, ...]:
        return tuple(
            m
            for m in self.methods
            if m.interceptable and (include_dunder or not is_dunder(m.name))
        )

    def _with(self, properties: Properties) -> StructuralModel:
        return replace(self, properties=properties)

    def only_nullable_properties(self) -> StructuralModel:
        return self._with(self.properties.only_nullable_properties())

    def only_properties_that_can_be_unset(self) -> StructuralModel:
        return self._with(self.properties.only_properties_that_can_be_unset())

    def only_non_referenceable_properties(self) -> StructuralModel:
        return self._with(self.properties.only_non_referenceable_properties())

    def filter(self, keys: Iterable[PropertyKey | str], *, strict: bool = False) -> StructuralModel:
        return self._with(self.properties.filter(keys, strict=strict))


def build_structural_model(target: type) -> StructuralModel:
    """Introspect and classify ``target``.

    Raises:
        UnsupportedTargetError: ``target`` cannot be proxied.
    """
    model = StructuralModel.from_raw(introspect(target))
    log.debug(
        "model.built",
        target=model.type_id,
        accessible=len(model.properties.accessible_properties()),
        private=len(model.properties.private_properties()),
        interceptable=len(model.interceptable_methods()),
    )
    return model
