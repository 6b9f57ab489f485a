"""Defaulting of computed AWSCluster spec fields.

Defaulters fill in fields the caller left unset and never fail. Each one
mutates the spec in place and is idempotent.

Order on every write path: CNI ingress rules, then bastion allow-list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from awscluster_admission.ingress import (
    CNI_INGRESS_RULES,
    DEFAULT_CNI_PLUGIN,
    canonical_ingress_rules,
)

if TYPE_CHECKING:
    from awscluster_admission.schemas import AWSClusterSpec

logger = structlog.get_logger(__name__)

DEFAULT_BASTION_CIDR_BLOCK = "0.0.0.0/0"


def default_bastion(spec: AWSClusterSpec) -> None:
    """Open the bastion to all addresses when no allow-list was given.

    A bastion with ingress rules disabled keeps its (possibly empty)
    allow-list; an empty list is the intended state there. A non-empty
    allow-list is never touched.

    Args:
        spec: Cluster spec to default in place.
    """
    bastion = spec.bastion
    if bastion.disable_ingress_rules or bastion.allowed_cidr_blocks:
        return

    bastion.allowed_cidr_blocks = [DEFAULT_BASTION_CIDR_BLOCK]
    logger.debug("bastion_cidr_defaulted", allowed_cidr_blocks=bastion.allowed_cidr_blocks)


def default_cni_ingress_rules(spec: AWSClusterSpec, plugin: str = DEFAULT_CNI_PLUGIN) -> None:
    """Populate CNI ingress rules for a CNI configuration without rules.

    No-op when the spec has no CNI configuration or when rules are
    already present; caller-supplied rules are never merged or replaced.

    Args:
        spec: Cluster spec to default in place.
        plugin: CNI plugin whose canonical rules are used.
    """
    cni = spec.network_spec.cni
    if cni is None or cni.cni_ingress_rules:
        return

    if plugin not in CNI_INGRESS_RULES:
        logger.warning("cni_plugin_unknown", plugin=plugin)
        return

    cni.cni_ingress_rules = canonical_ingress_rules(plugin)
    logger.debug(
        "cni_ingress_rules_defaulted",
        plugin=plugin,
        rule_count=len(cni.cni_ingress_rules),
    )


def default_cluster_spec(spec: AWSClusterSpec, plugin: str = DEFAULT_CNI_PLUGIN) -> None:
    """Run every defaulter on a spec, in write-path order.

    Args:
        spec: Cluster spec to default in place.
        plugin: CNI plugin whose canonical rules are used.
    """
    default_cni_ingress_rules(spec, plugin)
    default_bastion(spec)


__all__ = [
    "DEFAULT_BASTION_CIDR_BLOCK",
    "default_bastion",
    "default_cluster_spec",
    "default_cni_ingress_rules",
]
