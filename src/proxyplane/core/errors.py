"""ProxyPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Introspection (target cannot be proxied)
- 4xxx: Interception (hooks, unsupported proxy operations)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Introspection (3xxx)
    UNSUPPORTED_TARGET = 3001
    TARGET_NOT_A_CLASS = 3002
    TARGET_IS_FINAL = 3003
    TARGET_IS_BUILTIN = 3004
    TARGET_IS_PROXY = 3005
    TARGET_IS_ABSTRACT = 3006

    # Interception (4xxx)
    UNKNOWN_MEMBER = 4001
    UNSUPPORTED_OPERATION = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INVARIANT_VIOLATION = 9003


@dataclass(frozen=True, slots=True)
class ProxyPlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'UNSUPPORTED_TARGET')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ProxyPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class UnsupportedTargetError(ProxyPlaneError):
    """The requested type cannot be introspected or proxied."""

    @classmethod
    def not_a_class(cls, target: Any) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.TARGET_NOT_A_CLASS,
            message=f"Expected a class, got {type(target).__name__}",
            details={"target": repr(target)},
        )

    @classmethod
    def builtin(cls, type_id: str, base: str) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.TARGET_IS_BUILTIN,
            message=f"Cannot proxy {type_id}: it derives from built-in type {base}",
            details={"type": type_id, "base": base},
        )

    @classmethod
    def final(cls, type_id: str) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.TARGET_IS_FINAL,
            message=f"Cannot proxy {type_id}: class is marked final",
            details={"type": type_id},
        )

    @classmethod
    def already_proxy(cls, type_id: str) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.TARGET_IS_PROXY,
            message=f"Cannot proxy {type_id}: class is itself a generated proxy",
            details={"type": type_id},
        )

    @classmethod
    def abstract(cls, type_id: str, methods: list[str]) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.TARGET_IS_ABSTRACT,
            message=f"Cannot proxy {type_id}: abstract methods {', '.join(methods)}",
            details={"type": type_id, "abstract_methods": methods},
        )

    @classmethod
    def excluded(cls, type_id: str, reason: str) -> "UnsupportedTargetError":
        return cls(
            code=ErrorCode.UNSUPPORTED_TARGET,
            message=f"Cannot proxy {type_id}: {reason}",
            details={"type": type_id, "reason": reason},
        )


class UnknownMemberError(ProxyPlaneError):
    """A hook or filter names a member absent from the structural model."""

    @classmethod
    def for_method(cls, type_id: str, name: str) -> "UnknownMemberError":
        return cls(
            code=ErrorCode.UNKNOWN_MEMBER,
            message=f"{type_id} has no interceptable method '{name}'",
            details={"type": type_id, "member": name, "kind": "method"},
        )

    @classmethod
    def for_property(cls, type_id: str, key: str) -> "UnknownMemberError":
        return cls(
            code=ErrorCode.UNKNOWN_MEMBER,
            message=f"{type_id} has no property '{key}'",
            details={"type": type_id, "member": key, "kind": "property"},
        )


class UnsupportedOperationError(ProxyPlaneError):
    """Operation a proxy deliberately does not support."""

    @classmethod
    def unset(cls, type_id: str, name: str) -> "UnsupportedOperationError":
        return cls(
            code=ErrorCode.UNSUPPORTED_OPERATION,
            message=f"Cannot unset '{name}' through a proxy of {type_id}",
            details={"type": type_id, "member": name, "operation": "unset"},
        )


class InternalError(ProxyPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )


class InvariantViolationError(InternalError):
    """Two property identities collided after classification."""

    @classmethod
    def duplicate_property(cls, declaring_type: str, name: str) -> "InvariantViolationError":
        return cls(
            code=ErrorCode.INVARIANT_VIOLATION,
            message=f"Duplicate property identity ({declaring_type}, {name})",
            details={"declaring_type": declaring_type, "name": name},
        )
