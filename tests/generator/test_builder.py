"""Tests for generator/builder.py - proxy class synthesis."""

from typing import Any

import pytest

from proxyplane.core.errors import UnsupportedOperationError
from proxyplane.generator.builder import DispatchContract, ScopeLocalizerBuilder
from proxyplane.interception.state import PROXY_STATE_SLOT
from proxyplane.introspection.members import PROXY_MARKER
from proxyplane.introspection.structure import build_structural_model
from tests import assets


def _build(target: type, contract: DispatchContract | None = None) -> type:
    return ScopeLocalizerBuilder().build(build_structural_model(target), contract or DispatchContract())


class TestScopeLocalizerBuilder:
    """Shape of generated proxy classes."""

    def test_given_model_when_built_then_subclass_with_marker(self) -> None:
        # Given
        target = assets.Greeter

        # When
        proxy_cls = _build(target)

        # Then
        assert issubclass(proxy_cls, target)
        assert proxy_cls.__name__ == "GreeterProxy"
        assert proxy_cls.__qualname__ == "GreeterProxy"
        assert proxy_cls.__module__ == "tests.assets"
        assert getattr(proxy_cls, PROXY_MARKER) is target
        assert proxy_cls.__slots__ == (PROXY_STATE_SLOT,)  # type: ignore[attr-defined]

    def test_given_model_when_built_then_interceptors_keep_metadata(self) -> None:
        """Generated methods carry the wrapped method's name and docs."""
        # Given
        proxy_cls = _build(assets.Greeter)

        # When
        greet = proxy_cls.__dict__["greet"]

        # Then
        assert greet.__name__ == "greet"
        assert greet.__wrapped__ is assets.Greeter.__dict__["greet"]

    def test_given_private_method_when_built_then_not_overridden(self) -> None:
        # Given
        proxy_cls = _build(assets.BaseClass)

        # Then
        assert "public_method" in proxy_cls.__dict__
        assert "_protected_method" in proxy_cls.__dict__
        assert "_BaseClass__private_method" not in proxy_cls.__dict__

    def test_given_custom_contract_when_built_then_entry_points_renamed(self) -> None:
        # Given
        contract = DispatchContract(
            constructor="wrap", set_prefix="before", set_suffix="after"
        )

        # When
        proxy_cls = _build(assets.ValueHolder, contract)
        proxy = proxy_cls.wrap(assets.ValueHolder())  # type: ignore[attr-defined]

        def hook(*args: Any) -> str:
            args[-1].value = True
            return "before"

        proxy.before("get", hook)

        # Then
        assert proxy.get() == "before"
        assert not hasattr(proxy_cls, "proxy_constructor")

    def test_given_slots_target_when_built_then_slot_forwarders_generated(self) -> None:
        # Given
        proxy_cls = _build(assets.ClassWithSlots)

        # Then
        assert isinstance(proxy_cls.__dict__["x"], property)
        assert isinstance(proxy_cls.__dict__["_y"], property)

    def test_given_built_class_when_attribute_deleted_then_unsupported(self) -> None:
        # Given
        proxy = _build(assets.ValueHolder).proxy_constructor(assets.ValueHolder())  # type: ignore[attr-defined]

        # When / Then
        with pytest.raises(UnsupportedOperationError):
            del proxy.anything
