"""Validation of AWSCluster specs on create, update and delete.

Two error-collection strategies live here:

- Update validation evaluates every immutability check and returns all
  violations together.
- Bastion validation stops at the first fault (see
  ``awscluster_admission.cidr``) and yields at most one violation.

Example:
    >>> from awscluster_admission.schemas import AWSClusterSpec
    >>> errors = validate_update(
    ...     AWSClusterSpec(region="us-east-1"), AWSClusterSpec(region="us-east-2")
    ... )
    >>> [e.field for e in errors]
    ['spec.region']
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from awscluster_admission.cidr import validate_allowed_cidr_blocks
from awscluster_admission.errors import (
    CIDRValidationError,
    ConflictingConfigurationError,
    FieldError,
    FieldPath,
)

if TYPE_CHECKING:
    from awscluster_admission.schemas import APIEndpoint, AWSClusterSpec

logger = structlog.get_logger(__name__)

SPEC_PATH = FieldPath("spec")


class EndpointState(str, Enum):
    """Outcome of comparing a write-once endpoint across an update."""

    UNSET = "unset"
    UNCHANGED = "unchanged"
    CHANGED = "changed"


def compare_endpoint(old: APIEndpoint, new: APIEndpoint) -> EndpointState:
    """Classify an endpoint update.

    The first assignment of an unset endpoint is always allowed, so an
    unset old value is reported as UNSET without comparing.
    """
    if old.is_zero():
        return EndpointState.UNSET
    if new == old:
        return EndpointState.UNCHANGED
    return EndpointState.CHANGED


def validate_update(old: AWSClusterSpec, new: AWSClusterSpec) -> list[FieldError]:
    """Check that an update leaves immutable fields alone.

    Every check runs regardless of earlier failures.

    Args:
        old: Spec as currently persisted.
        new: Spec requested by the update.

    Returns:
        All immutability violations, empty if the update is acceptable.
    """
    errors: list[FieldError] = []

    if new.region != old.region:
        errors.append(FieldError.immutable(SPEC_PATH.child("region"), new.region))

    if new.control_plane_load_balancer != old.control_plane_load_balancer:
        errors.append(
            FieldError.immutable(
                SPEC_PATH.child("controlPlaneLoadBalancer"),
                new.control_plane_load_balancer,
            )
        )

    if (
        compare_endpoint(old.control_plane_endpoint, new.control_plane_endpoint)
        is EndpointState.CHANGED
    ):
        errors.append(
            FieldError.immutable(
                SPEC_PATH.child("controlPlaneEndpoint"),
                new.control_plane_endpoint,
            )
        )

    if errors:
        logger.info(
            "immutable_fields_changed",
            fields=[e.field for e in errors],
            error_count=len(errors),
        )
    return errors


def validate_bastion(spec: AWSClusterSpec) -> list[FieldError]:
    """Validate the bastion allow-list, reporting only the first fault.

    Args:
        spec: Spec whose bastion is checked.

    Returns:
        A single FieldError for the first fault, or an empty list.
    """
    path = SPEC_PATH.child("bastion", "allowedCIDRBlocks")
    try:
        validate_allowed_cidr_blocks(spec.bastion)
    except ConflictingConfigurationError as e:
        return [FieldError.forbidden(path, str(e))]
    except CIDRValidationError as e:
        return [FieldError.invalid(path.index(e.index), e.cidr, str(e))]
    return []


def validate_create(spec: AWSClusterSpec) -> list[FieldError]:
    """Validate a spec being created.

    Args:
        spec: Spec requested by the create, after defaulting.

    Returns:
        Violations, empty if the spec is acceptable.
    """
    return validate_bastion(spec)


def validate_delete(spec: AWSClusterSpec) -> list[FieldError]:  # noqa: ARG001
    """Deletion is always accepted."""
    return []


__all__ = [
    "EndpointState",
    "compare_endpoint",
    "validate_bastion",
    "validate_create",
    "validate_delete",
    "validate_update",
]
