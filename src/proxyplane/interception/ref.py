"""Mutable cell for by-reference arguments and hook flags."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Ref(Generic[T]):
    """A single mutable slot shared between caller and callee.

    Parameters annotated ``Ref`` / ``Ref[T]`` are treated as by-reference:
    the proxy hands the caller's cell to the real method unchanged, so
    writes to ``ref.value`` are visible to the caller after the call.
    Hooks receive their ``return_early`` flag as a ``Ref[bool]``.
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"
