"""Admission entry points for AWSCluster resources.

AWSClusterWebhook is what a hosting admission framework calls. It owns no
transport: requests arrive as deserialized AWSCluster snapshots and
rejections leave as FieldError lists or a ClusterValidationError.

Write paths:
    create: default CNI rules -> default bastion -> validate bastion
    update: default CNI rules -> default bastion -> validate bastion
            -> validate immutable fields against the persisted snapshot

Example:
    >>> from awscluster_admission.schemas import AWSCluster
    >>> webhook = AWSClusterWebhook()
    >>> cluster = webhook.admit(Operation.CREATE, AWSCluster())
    >>> cluster.spec.bastion.allowed_cidr_blocks
    ['0.0.0.0/0']
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from awscluster_admission.config import AdmissionSettings
from awscluster_admission.defaults import default_cluster_spec
from awscluster_admission.errors import ClusterValidationError, FieldError
from awscluster_admission.telemetry.tracing import ATTR_ERROR_COUNT, admission_span, get_tracer
from awscluster_admission.validation import (
    validate_bastion,
    validate_create,
    validate_delete,
    validate_update,
)

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from awscluster_admission.schemas import AWSCluster

logger = structlog.get_logger(__name__)


class Operation(str, Enum):
    """Admission request operation."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AWSClusterWebhook:
    """Defaulting and validating webhook for AWSCluster.

    Holds only configuration; every call works on the request-local
    snapshots passed in, so one instance may serve concurrent requests.

    Attributes:
        settings: Admission settings (CNI plugin selection, logging).
    """

    def __init__(
        self,
        settings: AdmissionSettings | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.settings = settings if settings is not None else AdmissionSettings()
        self._tracer = tracer
        self._log = logger.bind(
            component="AWSClusterWebhook",
            cni_plugin=self.settings.default_cni_plugin,
        )

    @property
    def tracer(self) -> Tracer:
        return self._tracer if self._tracer is not None else get_tracer()

    def default(self, cluster: AWSCluster) -> AWSCluster:
        """Fill unset computed fields of the cluster spec in place.

        Args:
            cluster: Cluster to default.

        Returns:
            The same cluster, for chaining.
        """
        with admission_span(
            self.tracer,
            "default",
            cluster_name=cluster.metadata.name,
            namespace=cluster.metadata.namespace,
        ):
            default_cluster_spec(cluster.spec, self.settings.default_cni_plugin)
        return cluster

    def validate_create(self, cluster: AWSCluster) -> list[FieldError]:
        """Validate a cluster being created.

        Returns:
            Violations; empty means the create is accepted.
        """
        with admission_span(
            self.tracer,
            "validate_create",
            cluster_name=cluster.metadata.name,
            namespace=cluster.metadata.namespace,
        ) as span:
            errors = validate_create(cluster.spec)
            span.set_attribute(ATTR_ERROR_COUNT, len(errors))
        return errors

    def validate_update(self, old: AWSCluster, new: AWSCluster) -> list[FieldError]:
        """Validate an update of a persisted cluster.

        A bastion fault is reported on its own, before immutability is
        considered; otherwise every immutability violation is reported.

        Args:
            old: Cluster as currently persisted.
            new: Cluster requested by the update, after defaulting.

        Returns:
            Violations; empty means the update is accepted.
        """
        with admission_span(
            self.tracer,
            "validate_update",
            cluster_name=new.metadata.name,
            namespace=new.metadata.namespace,
        ) as span:
            errors = validate_bastion(new.spec) or validate_update(old.spec, new.spec)
            span.set_attribute(ATTR_ERROR_COUNT, len(errors))
        return errors

    def validate_delete(self, cluster: AWSCluster) -> list[FieldError]:
        """Validate a cluster deletion. Always accepted."""
        with admission_span(
            self.tracer,
            "validate_delete",
            cluster_name=cluster.metadata.name,
            namespace=cluster.metadata.namespace,
        ):
            return validate_delete(cluster.spec)

    def admit(
        self,
        operation: Operation,
        cluster: AWSCluster,
        old: AWSCluster | None = None,
    ) -> AWSCluster:
        """Run the full write path for one admission request.

        The request is accepted or rejected as a whole; on rejection the
        defaulted cluster must not be persisted.

        Args:
            operation: Requested operation.
            cluster: Incoming cluster; defaulted in place on create/update.
            old: Persisted cluster, required for updates.

        Returns:
            The admitted cluster.

        Raises:
            ValueError: If an update is requested without the old cluster.
            ClusterValidationError: If the request is rejected.
        """
        operation = Operation(operation)
        if operation is Operation.DELETE:
            errors = self.validate_delete(cluster)
        elif operation is Operation.CREATE:
            self.default(cluster)
            errors = self.validate_create(cluster)
        else:
            if old is None:
                msg = "UPDATE requires the persisted cluster"
                raise ValueError(msg)
            self.default(cluster)
            errors = self.validate_update(old, cluster)

        if errors:
            self._log.info(
                "admission_denied",
                operation=operation.value,
                cluster=cluster.metadata.name,
                fields=[e.field for e in errors],
            )
            raise ClusterValidationError(errors, kind=cluster.kind, name=cluster.metadata.name)

        self._log.debug(
            "admission_allowed", operation=operation.value, cluster=cluster.metadata.name
        )
        return cluster


__all__ = ["AWSClusterWebhook", "Operation"]
