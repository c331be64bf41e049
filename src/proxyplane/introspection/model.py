"""Structural descriptors for proxied classes.

Python visibility maps onto naming conventions:
- public: ``name`` (and special ``__name__`` names)
- protected: ``_name``
- private: ``__name``, stored by the interpreter as ``_Class__name``

A private member is identified by ``(declaring type, "__name")`` so that
same-named privates declared at different levels of a hierarchy stay apart.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

TypeId = str


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class Storage(str, Enum):
    """Where a property's value lives on an instance."""

    DICT = "dict"  # instance __dict__, can be aliased by a proxy
    SLOT = "slot"  # __slots__ member descriptor
    DESCRIPTOR = "descriptor"  # property or other descriptor, computed on access


class PropertyKey(NamedTuple):
    """Identity of a property: declaring type plus declared name."""

    declaring_type: TypeId
    name: str


def type_id_of(cls: type) -> TypeId:
    return f"{cls.__module__}.{cls.__qualname__}"


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _mangle_prefix(cls: type) -> str | None:
    stripped = cls.__name__.lstrip("_")
    if not stripped:
        return None
    return f"_{stripped}__"


def classify_name(cls: type, storage_name: str) -> tuple[Visibility, str]:
    """Split an attribute key of ``cls`` into (visibility, declared name)."""
    prefix = _mangle_prefix(cls)
    if (
        prefix is not None
        and storage_name.startswith(prefix)
        and len(storage_name) > len(prefix)
        and not storage_name.endswith("__")
    ):
        return Visibility.PRIVATE, "__" + storage_name[len(prefix) :]
    if is_dunder(storage_name):
        return Visibility.PUBLIC, storage_name
    if storage_name.startswith("_"):
        return Visibility.PROTECTED, storage_name
    return Visibility.PUBLIC, storage_name


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One declared instance property."""

    name: str
    declaring_type: TypeId
    visibility: Visibility
    nullable: bool
    referenceable: bool
    storage: Storage = Storage.DICT
    storage_name: str = ""
    annotation: str | None = None
    has_default: bool = False
    can_be_unset: bool = True

    @property
    def key(self) -> PropertyKey:
        return PropertyKey(self.declaring_type, self.name)

    @property
    def accessible(self) -> bool:
        return self.visibility is not Visibility.PRIVATE


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    name: str
    by_reference: bool = False
    variadic: bool = False
    kind: str = "POSITIONAL_OR_KEYWORD"
    has_default: bool = False


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """One declared instance method.

    ``signature`` excludes the bound ``self`` parameter and is what the
    dispatcher binds call arguments against.
    """

    name: str
    declaring_type: TypeId
    visibility: Visibility
    parameters: tuple[ParameterDescriptor, ...] = ()
    returns_void: bool = False
    interceptable: bool = True
    signature: inspect.Signature | None = field(default=None, compare=False, repr=False)
