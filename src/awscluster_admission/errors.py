"""Admission error types and field-scoped error records.

This module defines the exception hierarchy raised by the admission engine
and the FieldError record used to report field-path scoped violations.

Exception Hierarchy:
    ClusterAdmissionError (base)
    ├── BastionValidationError
    │   ├── CIDRValidationError            # Entry is not a valid CIDR block
    │   └── ConflictingConfigurationError  # disableIngressRules with CIDR blocks
    └── ClusterValidationError             # Aggregated rejection of a request

Example:
    >>> from awscluster_admission.errors import FieldError, FieldPath
    >>> err = FieldError.immutable(FieldPath("spec").child("region"), "us-east-2")
    >>> str(err)
    'spec.region: Invalid value: "us-east-2": field is immutable'
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

IMMUTABLE_DETAIL = "field is immutable"


class FieldErrorType(str, Enum):
    """Machine-checkable kind of a field error."""

    IMMUTABLE = "immutable"
    INVALID = "invalid"
    FORBIDDEN = "forbidden"
    REQUIRED = "required"


class FieldPath:
    """Dot/bracket path into a resource, e.g. ``spec.bastion.allowedCIDRBlocks[0]``.

    Paths are immutable; ``child`` and ``index`` return new paths.
    """

    __slots__ = ("_parts",)

    def __init__(self, *names: str) -> None:
        self._parts: tuple[str, ...] = tuple(names)

    def child(self, name: str, *more: str) -> FieldPath:
        """Return the path of a named sub-field."""
        path = FieldPath()
        path._parts = (*self._parts, name, *more)
        return path

    def index(self, i: int) -> FieldPath:
        """Return the path of a list element."""
        path = FieldPath()
        if self._parts:
            path._parts = (*self._parts[:-1], f"{self._parts[-1]}[{i}]")
        else:
            path._parts = (f"[{i}]",)
        return path

    def __str__(self) -> str:
        return ".".join(self._parts)

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldPath):
            return self._parts == other._parts
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._parts)


class FieldError(BaseModel):
    """A single field-path scoped violation.

    Attributes:
        field: Dot/bracket notation path into the resource.
        type: Kind of violation (immutable, invalid, forbidden, required).
        value: The offending value, when one is meaningful.
        detail: Human-readable reason.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: str = Field(..., description="Path of the offending field")
    type: FieldErrorType = Field(..., description="Kind of violation")
    value: Any = Field(default=None, description="Offending value, if any")
    detail: str = Field(default="", description="Human-readable reason")

    @classmethod
    def immutable(cls, path: FieldPath, value: Any) -> FieldError:
        return cls(
            field=str(path),
            type=FieldErrorType.IMMUTABLE,
            value=value,
            detail=IMMUTABLE_DETAIL,
        )

    @classmethod
    def invalid(cls, path: FieldPath, value: Any, detail: str) -> FieldError:
        return cls(field=str(path), type=FieldErrorType.INVALID, value=value, detail=detail)

    @classmethod
    def forbidden(cls, path: FieldPath, detail: str) -> FieldError:
        return cls(field=str(path), type=FieldErrorType.FORBIDDEN, detail=detail)

    @classmethod
    def required(cls, path: FieldPath, detail: str) -> FieldError:
        return cls(field=str(path), type=FieldErrorType.REQUIRED, detail=detail)

    def __str__(self) -> str:
        if self.type is FieldErrorType.FORBIDDEN:
            return f"{self.field}: Forbidden: {self.detail}"
        if self.type is FieldErrorType.REQUIRED:
            return f"{self.field}: Required value: {self.detail}"
        return f"{self.field}: Invalid value: {_format_value(self.value)}: {self.detail}"


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, BaseModel):
        return repr(value.model_dump(by_alias=True, exclude_none=True))
    return repr(value)


class ClusterAdmissionError(Exception):
    """Base exception for admission errors.

    All admission exceptions inherit from this class so callers can
    reject a request with a single except clause.
    """

    pass


class BastionValidationError(ClusterAdmissionError):
    """The bastion ingress configuration failed validation."""

    pass


class CIDRValidationError(BastionValidationError):
    """Invalid CIDR notation in a bastion allow-list.

    Attributes:
        cidr: The offending string.
        index: Position of the entry in allowedCIDRBlocks.

    Example:
        >>> raise CIDRValidationError("abcdefg", 0)
        Traceback (most recent call last):
            ...
        CIDRValidationError: CIDR block 'abcdefg' is invalid: ...
    """

    def __init__(self, cidr: str, index: int, reason: str = "not a valid CIDR block") -> None:
        self.cidr = cidr
        self.index = index
        self.reason = reason
        super().__init__(f"CIDR block {cidr!r} is invalid: {reason}")


class ConflictingConfigurationError(BastionValidationError):
    """Mutually exclusive bastion settings were asserted together."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "disableIngressRules cannot be set when allowedCIDRBlocks is non-empty"
        )


class ClusterValidationError(ClusterAdmissionError):
    """An admission request was rejected.

    Carries every field error that caused the rejection so the hosting
    framework can build its denial response.

    Attributes:
        field_errors: Violations that caused the rejection.
        kind: Resource kind used in the message.
        name: Resource name used in the message.
    """

    def __init__(
        self,
        field_errors: list[FieldError],
        *,
        kind: str = "AWSCluster",
        name: str = "",
    ) -> None:
        self.field_errors = list(field_errors)
        self.kind = kind
        self.name = name
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        reasons = ", ".join(str(e) for e in self.field_errors)
        if len(self.field_errors) == 1:
            return f'{self.kind} "{self.name}" is invalid: {reasons}'
        return f'{self.kind} "{self.name}" is invalid: [{reasons}]'

    @property
    def fields(self) -> list[str]:
        """Paths of the offending fields, in reporting order."""
        return [e.field for e in self.field_errors]


__all__ = [
    "IMMUTABLE_DETAIL",
    "BastionValidationError",
    "CIDRValidationError",
    "ClusterAdmissionError",
    "ClusterValidationError",
    "ConflictingConfigurationError",
    "FieldError",
    "FieldErrorType",
    "FieldPath",
]
