"""Property classification and filtered views.

``Properties`` is an immutable, ordered collection of property descriptors.
Every view is keyed by storage name (``name``, ``_name`` or ``_Class__name``),
which is unique across the collection. Narrowing operations return a new
``Properties``; the source collection is never modified.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Iterable, Iterator
from typing import Any

from proxyplane.core.errors import InvariantViolationError, UnknownMemberError
from proxyplane.introspection.members import MISSING, RawProperty
from proxyplane.introspection.model import (
    PropertyDescriptor,
    PropertyKey,
    Storage,
    TypeId,
    Visibility,
    classify_name,
    type_id_of,
)

_NULLABLE_NAMES = frozenset({"None", "NoneType", "Any", "object", "typing.Any"})


def admits_none(annotation: Any) -> bool:
    """Whether a declared type allows ``None``. Untyped counts as nullable."""
    if annotation is MISSING:
        return True
    if annotation is None or annotation is type(None) or annotation is Any or annotation is object:
        return True
    if isinstance(annotation, str):
        return _text_admits_none(annotation.replace(" ", ""))
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(admits_none(arg) for arg in typing.get_args(annotation))
    if origin is typing.Annotated:
        return admits_none(typing.get_args(annotation)[0])
    if origin is typing.Literal:
        return None in typing.get_args(annotation)
    return False


def _split_top_level(text: str, sep: str) -> list[str]:
    parts: list[str] = []
    depth = start = 0
    for i, ch in enumerate(text):
        if ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def _text_admits_none(text: str) -> bool:
    """String form of ``admits_none`` for annotations that did not resolve."""
    text = text.strip("\"'")
    members = _split_top_level(text, "|")
    if len(members) > 1:
        return any(_text_admits_none(member) for member in members)
    if not (text.endswith("]") and "[" in text):
        return text in _NULLABLE_NAMES
    head, _, inner = text[:-1].partition("[")
    args = _split_top_level(inner, ",")
    head = head.rsplit(".", 1)[-1]
    if head == "Optional":
        return True
    if head == "Union":
        return any(_text_admits_none(arg) for arg in args)
    if head == "Annotated":
        return _text_admits_none(args[0])
    if head == "Literal":
        return "None" in args
    return False


def render_annotation(annotation: Any) -> str | None:
    if annotation is MISSING:
        return None
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")


def _can_be_unset(raw: RawProperty) -> bool:
    if raw.storage is Storage.DESCRIPTOR:
        if isinstance(raw.descriptor, property):
            return raw.descriptor.fdel is not None
        return hasattr(type(raw.descriptor), "__delete__") or not hasattr(
            type(raw.descriptor), "__set__"
        )
    return raw.annotation is MISSING or raw.has_default


def classify_property(raw: RawProperty) -> PropertyDescriptor:
    visibility, name = classify_name(raw.declaring, raw.storage_name)
    return PropertyDescriptor(
        name=name,
        declaring_type=type_id_of(raw.declaring),
        visibility=visibility,
        nullable=admits_none(raw.annotation),
        referenceable=raw.storage is Storage.DICT,
        storage=raw.storage,
        storage_name=raw.storage_name,
        annotation=render_annotation(raw.annotation),
        has_default=raw.has_default,
        can_be_unset=_can_be_unset(raw),
    )


class Properties:
    """Ordered, immutable set of classified properties."""

    __slots__ = ("_items", "_type_id")

    def __init__(self, items: Iterable[PropertyDescriptor], type_id: TypeId = "") -> None:
        keys: set[PropertyKey] = set()
        storage_names: set[str] = set()
        collected: list[PropertyDescriptor] = []
        for item in items:
            if item.key in keys or item.storage_name in storage_names:
                raise InvariantViolationError.duplicate_property(item.declaring_type, item.name)
            keys.add(item.key)
            storage_names.add(item.storage_name)
            collected.append(item)
        self._items: tuple[PropertyDescriptor, ...] = tuple(collected)
        self._type_id = type_id

    @classmethod
    def from_raw(cls, raw: Iterable[RawProperty], type_id: TypeId = "") -> Properties:
        return cls((classify_property(r) for r in raw), type_id)

    def _derive(self, items: Iterable[PropertyDescriptor]) -> Properties:
        return Properties(items, self._type_id)

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return self._find(key) is not None

    def __repr__(self) -> str:
        return f"Properties({[p.storage_name for p in self._items]!r})"

    def _find(self, key: object) -> PropertyDescriptor | None:
        if isinstance(key, tuple) and not isinstance(key, PropertyKey) and len(key) == 2:
            key = PropertyKey(*key)
        for item in self._items:
            if isinstance(key, PropertyKey):
                if item.key == key:
                    return item
            elif item.storage_name == key:
                return item
        return None

    def is_empty(self) -> bool:
        return not self._items

    def _view(self, *visibilities: Visibility) -> dict[str, PropertyDescriptor]:
        return {p.storage_name: p for p in self._items if p.visibility in visibilities}

    def public_properties(self) -> dict[str, PropertyDescriptor]:
        return self._view(Visibility.PUBLIC)

    def protected_properties(self) -> dict[str, PropertyDescriptor]:
        return self._view(Visibility.PROTECTED)

    def private_properties(self) -> dict[str, PropertyDescriptor]:
        return self._view(Visibility.PRIVATE)

    def accessible_properties(self) -> dict[str, PropertyDescriptor]:
        """Public and protected properties, reachable through inheritance."""
        return self._view(Visibility.PUBLIC, Visibility.PROTECTED)

    def instance_properties(self) -> dict[str, PropertyDescriptor]:
        return {p.storage_name: p for p in self._items}

    def grouped_private_properties(self) -> dict[TypeId, dict[str, PropertyDescriptor]]:
        """Private properties grouped by declaring type, keyed by declared name."""
        grouped: dict[TypeId, dict[str, PropertyDescriptor]] = {}
        for p in self._items:
            if p.visibility is Visibility.PRIVATE:
                grouped.setdefault(p.declaring_type, {})[p.name] = p
        return grouped

    def only_nullable_properties(self) -> Properties:
        return self._derive(p for p in self._items if p.nullable)

    def only_properties_that_can_be_unset(self) -> Properties:
        return self._derive(p for p in self._items if p.can_be_unset)

    def only_non_referenceable_properties(self) -> Properties:
        return self._derive(p for p in self._items if not p.referenceable)

    def filter(self, keys: Iterable[PropertyKey | str], *, strict: bool = False) -> Properties:
        """Drop the named properties from every view.

        Keys are ``PropertyKey`` identities or storage names. Keys that match
        nothing are ignored, unless ``strict`` is set.

        Raises:
            UnknownMemberError: ``strict`` is set and a key matches nothing.
        """
        excluded: set[PropertyKey] = set()
        for key in keys:
            item = self._find(key)
            if item is None:
                if strict:
                    raise UnknownMemberError.for_property(self._type_id, str(key))
                continue
            excluded.add(item.key)
        return self._derive(p for p in self._items if p.key not in excluded)
