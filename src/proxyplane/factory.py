"""Access interceptor factory: the construction entry point for proxies.

Builds (and by default caches) one proxy class per target class, then wraps
instances through the class's constructor entry point.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

import structlog

from proxyplane.config.models import ProxyPlaneConfig
from proxyplane.core.logging import bind_proxy_type, clear_proxy_type
from proxyplane.generator.builder import ArtifactBuilder, DispatchContract, ScopeLocalizerBuilder
from proxyplane.interception.state import Hook
from proxyplane.introspection.members import check_supported
from proxyplane.introspection.model import type_id_of
from proxyplane.introspection.structure import build_structural_model

log = structlog.get_logger(__name__)


class AccessInterceptorFactory:
    """Produces access-interceptor proxies that share state with their instance."""

    def __init__(
        self,
        config: ProxyPlaneConfig | None = None,
        builder: ArtifactBuilder | None = None,
    ) -> None:
        self._config = config or ProxyPlaneConfig()
        self._builder: ArtifactBuilder = builder or ScopeLocalizerBuilder()
        self._types: dict[type, type] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> ProxyPlaneConfig:
        return self._config

    @property
    def contract(self) -> DispatchContract:
        return DispatchContract(
            intercept_dunder_methods=self._config.proxy.intercept_dunder_methods,
            strict=self._config.proxy.strict,
        )

    def proxy_type(self, target: type) -> type:
        """Return the proxy class for ``target``, building it if needed.

        Raises:
            UnsupportedTargetError: ``target`` cannot be proxied.
        """
        check_supported(target)
        if not self._config.proxy.cache_types:
            return self._build(target)
        with self._lock:
            cached = self._types.get(target)
            if cached is None:
                cached = self._types[target] = self._build(target)
            return cached

    def _build(self, target: type) -> type:
        bind_proxy_type(type_id_of(target))
        try:
            model = build_structural_model(target)
            proxy_cls = self._builder.build(model, self.contract)
            log.debug("factory.proxy_type_built", methods=len(model.methods))
            return proxy_cls
        finally:
            clear_proxy_type()

    def create_proxy(
        self,
        instance: Any,
        prefix_interceptors: Mapping[str, Hook] | None = None,
        suffix_interceptors: Mapping[str, Hook] | None = None,
    ) -> Any:
        """Wrap ``instance`` in an access-interceptor proxy.

        Args:
            instance: Object to be localized within the proxy.
            prefix_interceptors: Hooks by method name, run before the real method.
            suffix_interceptors: Hooks by method name, run after the real method.

        Raises:
            UnsupportedTargetError: the instance's class cannot be proxied.
            UnknownMemberError: strict mode and a hook names an unknown method.
        """
        proxy_cls = self.proxy_type(type(instance))
        constructor = getattr(proxy_cls, self.contract.constructor)
        return constructor(instance, prefix_interceptors, suffix_interceptors)


_default_factory: AccessInterceptorFactory | None = None
_default_lock = threading.Lock()


def get_default_factory() -> AccessInterceptorFactory:
    global _default_factory
    with _default_lock:
        if _default_factory is None:
            _default_factory = AccessInterceptorFactory()
        return _default_factory


def set_default_factory(factory: AccessInterceptorFactory | None) -> None:
    """Replace the module-level factory (``None`` resets to a fresh default)."""
    global _default_factory
    with _default_lock:
        _default_factory = factory


def create_proxy(
    instance: Any,
    prefix_interceptors: Mapping[str, Hook] | None = None,
    suffix_interceptors: Mapping[str, Hook] | None = None,
) -> Any:
    return get_default_factory().create_proxy(instance, prefix_interceptors, suffix_interceptors)


def restore_proxy(wrapped: Any) -> Any:
    """Unpickling target: a hook-less proxy around the restored instance."""
    return create_proxy(wrapped)
