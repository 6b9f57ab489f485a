"""AWSCluster resource schemas.

This module defines Pydantic models for the AWSCluster resource as the
admission engine sees it: an already-deserialized snapshot whose ``spec``
the defaulters mutate in place and the validators compare.

Field names are snake_case in Python and camelCase on the wire; models
accept either form on input and dump by alias.

Example:
    >>> from awscluster_admission.schemas import AWSCluster
    >>> cluster = AWSCluster.model_validate(
    ...     {"metadata": {"name": "dev"}, "spec": {"region": "us-east-1"}}
    ... )
    >>> cluster.spec.region
    'us-east-1'
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Fields the admission engine does not read (vpc, subnets, identityRef, ...)
# are kept as written and dumped back unchanged.
_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="allow",
    validate_assignment=True,
)

_STRICT_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
    validate_assignment=True,
)


class ClassicELBScheme(str, Enum):
    """Scheme of the control plane classic load balancer."""

    INTERNET_FACING = "internet-facing"
    INTERNAL = "internal"


class SecurityGroupProtocol(str, Enum):
    """Protocol of a security group ingress rule.

    Values match the EC2 IpProtocol strings; non port-addressable
    protocols use their IANA number.
    """

    ALL = "-1"
    IP_IN_IP = "4"
    TCP = "tcp"
    UDP = "udp"
    ICMP = "icmp"
    ICMPV6 = "58"


class APIEndpoint(BaseModel):
    """Host and port of the control plane API server."""

    model_config = _STRICT_MODEL_CONFIG

    host: str = Field(default="", description="Hostname or IP of the endpoint")
    port: int = Field(default=0, ge=0, le=65535, description="Port of the endpoint")

    def is_zero(self) -> bool:
        """Whether the endpoint has not been assigned yet.

        An endpoint with an empty host counts as unset even if a port is
        present.
        """
        return self.host == ""


class AWSLoadBalancerSpec(BaseModel):
    """Control plane load balancer settings."""

    model_config = _MODEL_CONFIG

    scheme: ClassicELBScheme | None = Field(
        default=None, description="internet-facing or internal; unset means internet-facing"
    )
    cross_zone_load_balancing: bool = Field(
        default=False, description="Distribute traffic across all availability zones"
    )


class CNIIngressRule(BaseModel):
    """Ingress rule required by the CNI plugin's control traffic.

    ``from_port`` may be -1 meaning all ports, for protocols that are not
    port-addressable (e.g. IP-in-IP).
    """

    model_config = _STRICT_MODEL_CONFIG

    description: str
    protocol: SecurityGroupProtocol
    from_port: int = Field(..., ge=-1, le=65535)
    to_port: int = Field(..., ge=-1, le=65535)


class CNISpec(BaseModel):
    """CNI plugin configuration."""

    model_config = _MODEL_CONFIG

    cni_ingress_rules: list[CNIIngressRule] = Field(
        default_factory=list,
        alias="cniIngressRules",
        description="Ingress rules opened between control plane and nodes",
    )


class NetworkSpec(BaseModel):
    """Cluster network configuration."""

    model_config = _MODEL_CONFIG

    cni: CNISpec | None = Field(default=None, alias="cni")


class Bastion(BaseModel):
    """Bastion host settings.

    ``disable_ingress_rules`` and a non-empty ``allowed_cidr_blocks`` are
    mutually exclusive.
    """

    model_config = _MODEL_CONFIG

    enabled: bool = Field(default=False, description="Create a bastion host")
    disable_ingress_rules: bool = Field(
        default=False, description="Do not open any ingress to the bastion"
    )
    allowed_cidr_blocks: list[str] = Field(
        default_factory=list,
        alias="allowedCIDRBlocks",
        description="CIDR blocks allowed to reach the bastion",
    )
    instance_type: str | None = Field(default=None, description="EC2 instance type")
    ami: str | None = Field(default=None, description="AMI ID of the bastion host")


class AWSClusterSpec(BaseModel):
    """Desired state of an AWS cluster."""

    model_config = _MODEL_CONFIG

    region: str = Field(default="", description="AWS region; immutable after creation")
    ssh_key_name: str | None = Field(default=None, description="SSH key pair name")
    control_plane_endpoint: APIEndpoint = Field(
        default_factory=APIEndpoint,
        description="Control plane endpoint; write-once",
    )
    additional_tags: dict[str, str] = Field(default_factory=dict)
    control_plane_load_balancer: AWSLoadBalancerSpec | None = Field(
        default=None, description="Control plane load balancer; immutable"
    )
    image_lookup_org: str = Field(default="", description="AMI owner used for lookups")
    network_spec: NetworkSpec = Field(default_factory=NetworkSpec, alias="networkSpec")
    bastion: Bastion = Field(default_factory=Bastion)


class ObjectMeta(BaseModel):
    """Subset of Kubernetes object metadata used for error reporting."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class AWSCluster(BaseModel):
    """The AWSCluster resource."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", validate_assignment=True)

    api_version: str = Field(
        default="infrastructure.cluster.x-k8s.io/v1alpha3", alias="apiVersion"
    )
    kind: str = "AWSCluster"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: AWSClusterSpec = Field(default_factory=AWSClusterSpec)

    def to_manifest(self) -> dict[str, Any]:
        """Dump as a camelCase manifest dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "APIEndpoint",
    "AWSCluster",
    "AWSClusterSpec",
    "AWSLoadBalancerSpec",
    "Bastion",
    "ClassicELBScheme",
    "CNIIngressRule",
    "CNISpec",
    "NetworkSpec",
    "ObjectMeta",
    "SecurityGroupProtocol",
]
