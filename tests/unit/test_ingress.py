"""Unit tests for the canonical CNI ingress rule table."""

from __future__ import annotations

import pytest

from awscluster_admission.ingress import (
    CNI_INGRESS_RULES,
    DEFAULT_CNI_PLUGIN,
    canonical_ingress_rules,
    supported_cni_plugins,
)
from awscluster_admission.schemas import CNIIngressRule, SecurityGroupProtocol


class TestCanonicalIngressRules:
    """Test canonical_ingress_rules lookups."""

    def test_default_plugin_is_calico(self) -> None:
        """Test that calico is the built-in plugin."""
        assert DEFAULT_CNI_PLUGIN == "calico"

    def test_calico_rules_in_order(self) -> None:
        """Test the calico rule set: BGP first, then IP-in-IP."""
        assert canonical_ingress_rules("calico") == [
            CNIIngressRule(
                description="bgp (calico)",
                protocol=SecurityGroupProtocol.TCP,
                from_port=179,
                to_port=179,
            ),
            CNIIngressRule(
                description="IP-in-IP (calico)",
                protocol=SecurityGroupProtocol.IP_IN_IP,
                from_port=-1,
                to_port=65535,
            ),
        ]

    def test_returns_fresh_objects(self) -> None:
        """Test that mutating one result does not affect the next."""
        first = canonical_ingress_rules()
        first[0].description = "changed"
        first.pop()

        second = canonical_ingress_rules()
        assert len(second) == 2
        assert second[0].description == "bgp (calico)"

    def test_unknown_plugin_raises_key_error(self) -> None:
        """Test that a plugin without a rule set is a KeyError."""
        with pytest.raises(KeyError):
            canonical_ingress_rules("flannel")

    def test_table_is_read_only(self) -> None:
        """Test that the rule table cannot be modified at runtime."""
        with pytest.raises(TypeError):
            CNI_INGRESS_RULES["cilium"] = ()  # type: ignore[index]

    def test_supported_plugins(self) -> None:
        """Test that supported plugins are listed from the table."""
        assert supported_cni_plugins() == ["calico"]
