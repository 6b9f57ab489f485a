"""awscluster-admission: defaulting and validation for AWSCluster resources.

This package provides:
- AWSCluster, AWSClusterSpec: Pydantic models of the resource
- AWSClusterWebhook: Admission entry points (default, validate_*, admit)
- validate_update, validate_allowed_cidr_blocks: Core validators
- default_cluster_spec: Core defaulters
- FieldError, ClusterValidationError: Error reporting

Example:
    >>> from awscluster_admission import AWSCluster, AWSClusterWebhook, Operation
    >>> webhook = AWSClusterWebhook()
    >>> cluster = AWSCluster.model_validate({"spec": {"region": "us-east-1"}})
    >>> webhook.admit(Operation.CREATE, cluster).spec.bastion.allowed_cidr_blocks
    ['0.0.0.0/0']
"""

from __future__ import annotations

from typing import Any

__version__ = "0.1.0"

__all__ = [
    "AWSCluster",
    "AWSClusterSpec",
    "AWSClusterWebhook",
    "AdmissionSettings",
    "ClusterAdmissionError",
    "ClusterValidationError",
    "FieldError",
    "Operation",
    "default_cluster_spec",
    "validate_allowed_cidr_blocks",
    "validate_update",
]


def __getattr__(name: str) -> Any:
    """Lazy import of public components."""
    if name in {"AWSCluster", "AWSClusterSpec"}:
        from awscluster_admission import schemas

        return getattr(schemas, name)
    if name in {"AWSClusterWebhook", "Operation"}:
        from awscluster_admission import webhook

        return getattr(webhook, name)
    if name == "AdmissionSettings":
        from awscluster_admission.config import AdmissionSettings

        return AdmissionSettings
    if name in {"ClusterAdmissionError", "ClusterValidationError", "FieldError"}:
        from awscluster_admission import errors

        return getattr(errors, name)
    if name == "default_cluster_spec":
        from awscluster_admission.defaults import default_cluster_spec

        return default_cluster_spec
    if name == "validate_allowed_cidr_blocks":
        from awscluster_admission.cidr import validate_allowed_cidr_blocks

        return validate_allowed_cidr_blocks
    if name == "validate_update":
        from awscluster_admission.validation import validate_update

        return validate_update
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
