"""ProxyPlane - access-interceptor proxies that share state with the objects they wrap."""

from proxyplane.core.errors import (
    ProxyPlaneError,
    UnknownMemberError,
    UnsupportedOperationError,
    UnsupportedTargetError,
)
from proxyplane.factory import AccessInterceptorFactory, create_proxy
from proxyplane.interception.ref import Ref
from proxyplane.introspection.structure import StructuralModel, build_structural_model

__version__ = "0.1.0"

__all__ = [
    "AccessInterceptorFactory",
    "create_proxy",
    "Ref",
    "StructuralModel",
    "build_structural_model",
    "ProxyPlaneError",
    "UnknownMemberError",
    "UnsupportedOperationError",
    "UnsupportedTargetError",
]
