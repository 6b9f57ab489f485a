"""Unit tests for create/update/delete validation."""

from __future__ import annotations

import pytest

from awscluster_admission.errors import FieldErrorType
from awscluster_admission.schemas import (
    APIEndpoint,
    AWSClusterSpec,
    AWSLoadBalancerSpec,
    Bastion,
    ClassicELBScheme,
)
from awscluster_admission.validation import (
    EndpointState,
    compare_endpoint,
    validate_bastion,
    validate_create,
    validate_delete,
    validate_update,
)


class TestCompareEndpoint:
    """Test the write-once endpoint tri-state."""

    def test_zero_old_is_unset(self) -> None:
        """Test that an unassigned old endpoint is UNSET."""
        assert compare_endpoint(APIEndpoint(), APIEndpoint(host="a", port=1)) is (
            EndpointState.UNSET
        )

    def test_empty_host_with_port_is_unset(self) -> None:
        """Test that a port without a host still counts as unset."""
        old = APIEndpoint(host="", port=6443)
        assert compare_endpoint(old, APIEndpoint(host="b", port=1)) is EndpointState.UNSET

    def test_same_endpoint_is_unchanged(self) -> None:
        """Test that an identical endpoint is UNCHANGED."""
        endpoint = APIEndpoint(host="example.com", port=8000)
        assert compare_endpoint(endpoint, endpoint.model_copy()) is EndpointState.UNCHANGED

    def test_port_change_is_changed(self) -> None:
        """Test that changing only the port is CHANGED."""
        old = APIEndpoint(host="example.com", port=8000)
        new = APIEndpoint(host="example.com", port=9000)
        assert compare_endpoint(old, new) is EndpointState.CHANGED

    def test_clearing_is_changed(self) -> None:
        """Test that resetting a set endpoint to zero is CHANGED."""
        old = APIEndpoint(host="example.com", port=8000)
        assert compare_endpoint(old, APIEndpoint()) is EndpointState.CHANGED


class TestValidateUpdate:
    """Test validate_update immutability checks."""

    def test_region_is_immutable(self) -> None:
        """Test that changing the region is rejected on spec.region."""
        errors = validate_update(
            AWSClusterSpec(region="us-east-1"), AWSClusterSpec(region="us-east-2")
        )

        assert len(errors) == 1
        assert errors[0].field == "spec.region"
        assert errors[0].type is FieldErrorType.IMMUTABLE
        assert errors[0].detail == "field is immutable"
        assert errors[0].value == "us-east-2"

    def test_load_balancer_scheme_is_immutable(self) -> None:
        """Test that changing the load balancer scheme is rejected."""
        old = AWSClusterSpec(
            control_plane_load_balancer=AWSLoadBalancerSpec(scheme=ClassicELBScheme.INTERNAL)
        )
        new = AWSClusterSpec(
            control_plane_load_balancer=AWSLoadBalancerSpec(
                scheme=ClassicELBScheme.INTERNET_FACING
            )
        )

        errors = validate_update(old, new)

        assert [e.field for e in errors] == ["spec.controlPlaneLoadBalancer"]

    def test_load_balancer_added_is_rejected(self) -> None:
        """Test that going from no load balancer spec to one is a change."""
        new = AWSClusterSpec(control_plane_load_balancer=AWSLoadBalancerSpec())

        errors = validate_update(AWSClusterSpec(), new)

        assert [e.field for e in errors] == ["spec.controlPlaneLoadBalancer"]

    def test_load_balancer_scheme_set_from_unset_is_rejected(self) -> None:
        """Test that the nested optional scheme takes part in the comparison."""
        old = AWSClusterSpec(control_plane_load_balancer=AWSLoadBalancerSpec())
        new = AWSClusterSpec(
            control_plane_load_balancer=AWSLoadBalancerSpec(scheme=ClassicELBScheme.INTERNAL)
        )

        assert [e.field for e in validate_update(old, new)] == ["spec.controlPlaneLoadBalancer"]

    def test_equal_load_balancer_accepted(self) -> None:
        """Test that an equal load balancer spec passes."""
        lb = AWSLoadBalancerSpec(scheme=ClassicELBScheme.INTERNAL)
        old = AWSClusterSpec(control_plane_load_balancer=lb)
        new = AWSClusterSpec(control_plane_load_balancer=lb.model_copy())

        assert validate_update(old, new) == []

    def test_control_plane_endpoint_is_immutable(self) -> None:
        """Test that changing a set endpoint is rejected."""
        old = AWSClusterSpec(
            control_plane_endpoint=APIEndpoint(host="example.com", port=8000)
        )
        new = AWSClusterSpec(
            control_plane_endpoint=APIEndpoint(host="foo.example.com", port=9000)
        )

        errors = validate_update(old, new)

        assert [e.field for e in errors] == ["spec.controlPlaneEndpoint"]

    def test_control_plane_endpoint_can_be_set_when_empty(self) -> None:
        """Test that the first assignment of the endpoint is accepted."""
        old = AWSClusterSpec(control_plane_endpoint=APIEndpoint())
        new = AWSClusterSpec(
            control_plane_endpoint=APIEndpoint(host="example.com", port=8000)
        )

        assert validate_update(old, new) == []

    def test_all_violations_reported(self) -> None:
        """Test that every immutability check runs, without short-circuit."""
        old = AWSClusterSpec(
            region="us-east-1",
            control_plane_endpoint=APIEndpoint(host="example.com", port=8000),
        )
        new = AWSClusterSpec(
            region="eu-west-1",
            control_plane_load_balancer=AWSLoadBalancerSpec(scheme=ClassicELBScheme.INTERNAL),
            control_plane_endpoint=APIEndpoint(host="other.example.com", port=8000),
        )

        errors = validate_update(old, new)

        assert [e.field for e in errors] == [
            "spec.region",
            "spec.controlPlaneLoadBalancer",
            "spec.controlPlaneEndpoint",
        ]
        assert all(e.type is FieldErrorType.IMMUTABLE for e in errors)

    def test_mutable_fields_may_change(self) -> None:
        """Test that bastion and tag changes pass update validation."""
        old = AWSClusterSpec(region="us-east-1")
        new = AWSClusterSpec(
            region="us-east-1",
            additional_tags={"team": "infra"},
            bastion=Bastion(enabled=True),
        )

        assert validate_update(old, new) == []

    @pytest.mark.parametrize(
        ("old_region", "new_region"),
        [("us-east-1", "us-west-2"), ("", "us-east-1"), ("us-east-1", "")],
    )
    def test_any_region_change_rejected(self, old_region: str, new_region: str) -> None:
        """Test that any region difference fails, including from empty."""
        errors = validate_update(
            AWSClusterSpec(region=old_region), AWSClusterSpec(region=new_region)
        )
        assert [e.field for e in errors] == ["spec.region"]


class TestValidateBastion:
    """Test validate_bastion error translation."""

    def test_valid_bastion_has_no_errors(self) -> None:
        """Test that valid CIDRs produce no errors."""
        spec = AWSClusterSpec(bastion=Bastion(allowed_cidr_blocks=["192.168.0.0/16"]))
        assert validate_bastion(spec) == []

    def test_conflict_is_forbidden(self) -> None:
        """Test that the disabled-ingress conflict maps to a forbidden error."""
        spec = AWSClusterSpec(
            bastion=Bastion(allowed_cidr_blocks=["10.0.0.0/8"], disable_ingress_rules=True)
        )

        errors = validate_bastion(spec)

        assert len(errors) == 1
        assert errors[0].type is FieldErrorType.FORBIDDEN
        assert errors[0].field == "spec.bastion.allowedCIDRBlocks"

    def test_invalid_cidr_is_invalid_at_index(self) -> None:
        """Test that only the first bad CIDR is reported, at its index."""
        spec = AWSClusterSpec(
            bastion=Bastion(allowed_cidr_blocks=["10.0.0.0/8", "abcdefg", "also-bad"])
        )

        errors = validate_bastion(spec)

        assert len(errors) == 1
        assert errors[0].type is FieldErrorType.INVALID
        assert errors[0].field == "spec.bastion.allowedCIDRBlocks[1]"
        assert errors[0].value == "abcdefg"


class TestValidateCreateAndDelete:
    """Test validate_create and validate_delete."""

    def test_create_checks_bastion(self) -> None:
        """Test that create validation rejects bad bastion CIDRs."""
        spec = AWSClusterSpec(bastion=Bastion(allowed_cidr_blocks=["100.200.300.400/99"]))
        assert len(validate_create(spec)) == 1

    def test_create_rejects_trailing_newline(self) -> None:
        """Test that a CIDR with trailing whitespace is not stored as valid."""
        spec = AWSClusterSpec(bastion=Bastion(allowed_cidr_blocks=["10.0.0.0/8\n"]))

        errors = validate_create(spec)

        assert [e.field for e in errors] == ["spec.bastion.allowedCIDRBlocks[0]"]

    def test_create_accepts_valid_spec(self) -> None:
        """Test that a defaulted spec passes create validation."""
        spec = AWSClusterSpec(bastion=Bastion(allowed_cidr_blocks=["0.0.0.0/0"]))
        assert validate_create(spec) == []

    def test_delete_always_accepted(self) -> None:
        """Test that deletion never produces errors."""
        spec = AWSClusterSpec(
            bastion=Bastion(allowed_cidr_blocks=["abcdefg"], disable_ingress_rules=True)
        )
        assert validate_delete(spec) == []
