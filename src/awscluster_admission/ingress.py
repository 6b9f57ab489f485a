"""Canonical CNI ingress rules keyed by network plugin.

Each supported CNI plugin maps to the ordered list of ingress rules its
control-plane-to-node mesh traffic needs. Supporting another plugin means
adding an entry to ``CNI_INGRESS_RULES``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from awscluster_admission.schemas import CNIIngressRule, SecurityGroupProtocol

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_CNI_PLUGIN = "calico"

# Order matters: callers compare rule lists positionally.
_CALICO_RULES: tuple[tuple[str, SecurityGroupProtocol, int, int], ...] = (
    ("bgp", SecurityGroupProtocol.TCP, 179, 179),
    ("IP-in-IP", SecurityGroupProtocol.IP_IN_IP, -1, 65535),
)

CNI_INGRESS_RULES: Mapping[str, tuple[tuple[str, SecurityGroupProtocol, int, int], ...]] = (
    MappingProxyType({"calico": _CALICO_RULES})
)


def supported_cni_plugins() -> list[str]:
    """Plugins with a canonical rule set, sorted by name."""
    return sorted(CNI_INGRESS_RULES)


def canonical_ingress_rules(plugin: str = DEFAULT_CNI_PLUGIN) -> list[CNIIngressRule]:
    """Build the canonical ingress rules for a CNI plugin.

    Every call returns fresh rule objects, so callers may mutate the result.

    Args:
        plugin: CNI plugin identity, e.g. "calico".

    Returns:
        Ordered rules, each described as "<purpose> (<plugin>)".

    Raises:
        KeyError: If the plugin has no canonical rule set.

    Example:
        >>> [r.description for r in canonical_ingress_rules("calico")]
        ['bgp (calico)', 'IP-in-IP (calico)']
    """
    return [
        CNIIngressRule(
            description=f"{purpose} ({plugin})",
            protocol=protocol,
            from_port=from_port,
            to_port=to_port,
        )
        for purpose, protocol, from_port, to_port in CNI_INGRESS_RULES[plugin]
    ]


__all__ = [
    "CNI_INGRESS_RULES",
    "DEFAULT_CNI_PLUGIN",
    "canonical_ingress_rules",
    "supported_cni_plugins",
]
