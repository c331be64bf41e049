"""Member introspection: what a class declares, level by level.

Walks the MRO from the root down to the target and records every declared
instance property and every method together with the class that declares
it. Methods are plain functions plus callable non-data descriptors such as
``lru_cache`` wrappers, ``partialmethod`` and ``singledispatchmethod``.
Nothing here looks at instances; the member list comes from class
``__dict__`` entries, annotations and ``__slots__`` only.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any

import structlog

from proxyplane.core.errors import UnsupportedTargetError
from proxyplane.introspection.model import Storage, is_dunder, type_id_of

log = structlog.get_logger(__name__)

# Set on every generated proxy class; the value is the proxied target.
PROXY_MARKER = "__proxyplane_target__"

_TPFLAGS_HEAPTYPE = 1 << 9

# Bases that contribute no instance members of their own.
_TRANSPARENT_BASES = (object, typing.Generic)

# Bookkeeping attributes that metaclasses plant in class namespaces.
_IGNORED_NAMES = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class RawProperty:
    """A property as found on its declaring class, before classification."""

    storage_name: str
    declaring: type
    storage: Storage
    annotation: Any = MISSING
    has_default: bool = False
    descriptor: Any = None


@dataclass(frozen=True, slots=True)
class RawMethod:
    name: str
    declaring: type
    function: Any  # plain function, or a method descriptor such as partialmethod
    abstract: bool = False


@dataclass(frozen=True, slots=True)
class RawMemberSet:
    """Everything ``introspect`` found on one target class."""

    target: type
    properties: tuple[RawProperty, ...]
    methods: tuple[RawMethod, ...]

    @property
    def type_id(self) -> str:
        return type_id_of(self.target)


def check_supported(target: Any) -> None:
    """Raise UnsupportedTargetError unless ``target`` can be proxied."""
    if not isinstance(target, type):
        raise UnsupportedTargetError.not_a_class(target)

    type_id = type_id_of(target)
    if hasattr(target, PROXY_MARKER):
        raise UnsupportedTargetError.already_proxy(type_id)
    if getattr(target, "__final__", False):
        raise UnsupportedTargetError.final(type_id)

    for cls in target.__mro__:
        if cls in _TRANSPARENT_BASES:
            continue
        if cls.__module__ == "builtins" or not (cls.__flags__ & _TPFLAGS_HEAPTYPE):
            raise UnsupportedTargetError.builtin(type_id, type_id_of(cls))

    if issubclass(target, enum.Enum):
        raise UnsupportedTargetError.excluded(type_id, "enum classes cannot be subclassed")
    if inspect.isabstract(target):
        abstract = sorted(getattr(target, "__abstractmethods__", ()))
        raise UnsupportedTargetError.abstract(type_id, abstract)


def _own_annotations(cls: type) -> dict[str, Any]:
    try:
        return dict(inspect.get_annotations(cls, eval_str=True))
    except Exception:  # noqa: BLE001 - unresolvable forward refs fall back to strings
        pass
    if sys.version_info >= (3, 14):
        import annotationlib

        return dict(annotationlib.get_annotations(cls, format=annotationlib.Format.STRING))
    return dict(inspect.get_annotations(cls))


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        text = annotation.replace("typing.", "")
        return text == "ClassVar" or text.startswith("ClassVar[")
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _is_initvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.replace("dataclasses.", "").startswith("InitVar")
    return isinstance(annotation, dataclasses.InitVar) or annotation is dataclasses.InitVar


def _dataclass_default(cls: type, name: str) -> bool:
    fields = cls.__dict__.get("__dataclass_fields__", {})
    f = fields.get(name)
    if f is None:
        return False
    return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING


def _is_descriptor(value: Any) -> bool:
    return hasattr(type(value), "__get__") and not inspect.isfunction(value)


_PROPERTY_TYPES = (property, functools.cached_property)
_METHOD_DESCRIPTORS = (functools.partialmethod, functools.singledispatchmethod)


def _is_method_descriptor(value: Any) -> bool:
    """Callable non-data descriptors that bind like methods (lru_cache, partialmethod, ...)."""
    if isinstance(value, _METHOD_DESCRIPTORS):
        return True
    if inspect.isfunction(value) or isinstance(
        value, (staticmethod, classmethod, type, *_PROPERTY_TYPES)
    ):
        return False
    kind = type(value)
    return (
        callable(value)
        and hasattr(kind, "__get__")
        and not hasattr(kind, "__set__")
        and not hasattr(kind, "__delete__")
    )


def _descriptor_annotation(value: Any) -> Any:
    getter = getattr(value, "fget", None) or getattr(value, "func", None)
    if getter is None:
        return MISSING
    try:
        return getter.__annotations__.get("return", MISSING)
    except Exception:  # noqa: BLE001 - lazily evaluated annotations may not resolve
        return MISSING


def _is_method_like(value: Any) -> bool:
    return isinstance(value, (staticmethod, classmethod, type, types.ModuleType)) or (
        callable(value) and not _is_descriptor(value)
    )


def _collect(cls: type, properties: dict[str, RawProperty], methods: dict[str, RawMethod]) -> None:
    own = cls.__dict__
    annotations = _own_annotations(cls)

    for name, annotation in annotations.items():
        if is_dunder(name) or _is_classvar(annotation) or _is_initvar(annotation):
            continue
        value = own.get(name, MISSING)
        if isinstance(value, types.MemberDescriptorType):
            raw = RawProperty(
                name,
                cls,
                Storage.SLOT,
                annotation,
                has_default=_dataclass_default(cls, name),
                descriptor=value,
            )
        elif value is not MISSING and _is_descriptor(value):
            raw = RawProperty(name, cls, Storage.DESCRIPTOR, annotation, descriptor=value)
        else:
            has_default = value is not MISSING or _dataclass_default(cls, name)
            raw = RawProperty(name, cls, Storage.DICT, annotation, has_default=has_default)
        methods.pop(name, None)
        properties[name] = raw

    for name, value in own.items():
        if name in annotations or name in _IGNORED_NAMES:
            continue
        if is_dunder(name) and not inspect.isfunction(value):
            continue
        if inspect.isfunction(value) or _is_method_descriptor(value):
            properties.pop(name, None)
            methods[name] = RawMethod(
                name, cls, value, abstract=getattr(value, "__isabstractmethod__", False)
            )
        elif isinstance(value, types.MemberDescriptorType):
            methods.pop(name, None)
            properties[name] = RawProperty(name, cls, Storage.SLOT, descriptor=value)
        elif _is_descriptor(value) and not isinstance(value, (staticmethod, classmethod)):
            methods.pop(name, None)
            properties[name] = RawProperty(
                name, cls, Storage.DESCRIPTOR, _descriptor_annotation(value), descriptor=value
            )
        elif _is_method_like(value):
            continue
        else:
            methods.pop(name, None)
            properties[name] = RawProperty(name, cls, Storage.DICT, has_default=True)


def introspect(target: type) -> RawMemberSet:
    """Collect the declared members of ``target`` across its whole MRO.

    Classes are visited root-to-derived so that a redeclared public or
    protected member replaces the inherited entry. Private members are keyed
    by their mangled attribute name, which already differs per declaring
    class, so base and subclass privates with the same name both survive.

    Raises:
        UnsupportedTargetError: ``target`` cannot be proxied. Raised before
            any member is collected.
    """
    check_supported(target)

    properties: dict[str, RawProperty] = {}
    methods: dict[str, RawMethod] = {}
    for cls in reversed(target.__mro__):
        if cls in _TRANSPARENT_BASES:
            continue
        _collect(cls, properties, methods)

    raw = RawMemberSet(target, tuple(properties.values()), tuple(methods.values()))
    log.debug(
        "introspect.done",
        target=raw.type_id,
        properties=len(raw.properties),
        methods=len(raw.methods),
    )
    return raw


describe_type = introspect
