"""Introspection: member discovery, property classification, structural models."""

from proxyplane.introspection.members import (
    PROXY_MARKER,
    RawMemberSet,
    RawMethod,
    RawProperty,
    check_supported,
    describe_type,
    introspect,
)
from proxyplane.introspection.model import (
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    PropertyKey,
    Storage,
    TypeId,
    Visibility,
    type_id_of,
)
from proxyplane.introspection.properties import Properties, admits_none, classify_property
from proxyplane.introspection.structure import (
    RESERVED_METHODS,
    StructuralModel,
    build_structural_model,
    describe_method,
)

__all__ = [
    # Members
    "PROXY_MARKER",
    "RawMemberSet",
    "RawMethod",
    "RawProperty",
    "check_supported",
    "describe_type",
    "introspect",
    # Descriptors
    "MethodDescriptor",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "PropertyKey",
    "Storage",
    "TypeId",
    "Visibility",
    "type_id_of",
    # Classification
    "Properties",
    "admits_none",
    "classify_property",
    # Model
    "RESERVED_METHODS",
    "StructuralModel",
    "build_structural_model",
    "describe_method",
]
