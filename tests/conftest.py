"""Shared pytest fixtures for awscluster-admission tests.

NOTE: Do NOT add __init__.py to test directories - pytest uses importlib mode
which can cause namespace collisions with __init__.py files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from awscluster_admission.config import AdmissionSettings
from awscluster_admission.schemas import AWSCluster
from awscluster_admission.telemetry.tracing import reset_tracer

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_otel() -> Generator[None, None, None]:
    """Clear cached tracers around each test."""
    reset_tracer()
    yield
    reset_tracer()


@pytest.fixture(autouse=True)
def clean_admission_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove admission settings from the environment."""
    for var in (
        "AWSCLUSTER_ADMISSION_DEFAULT_CNI_PLUGIN",
        "AWSCLUSTER_ADMISSION_LOG_LEVEL",
        "AWSCLUSTER_ADMISSION_JSON_LOGS",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def tracer_with_exporter() -> tuple[TracerProvider, InMemorySpanExporter]:
    """Create a TracerProvider with an InMemorySpanExporter for testing."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider(resource=Resource.create({}))
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider, exporter


@pytest.fixture
def settings() -> AdmissionSettings:
    """Default admission settings."""
    return AdmissionSettings()


@pytest.fixture
def persisted_cluster() -> AWSCluster:
    """A cluster as stored after creation, with its endpoint assigned."""
    return AWSCluster.model_validate(
        {
            "metadata": {"name": "prod", "namespace": "clusters"},
            "spec": {
                "region": "us-east-1",
                "controlPlaneEndpoint": {"host": "example.com", "port": 6443},
                "controlPlaneLoadBalancer": {"scheme": "internal"},
                "networkSpec": {"cni": {}},
                "bastion": {"enabled": True, "allowedCIDRBlocks": ["10.0.0.0/8"]},
            },
        }
    )


@pytest.fixture
def cluster_manifest_yaml() -> str:
    """A minimal AWSCluster manifest."""
    return """\
apiVersion: infrastructure.cluster.x-k8s.io/v1alpha3
kind: AWSCluster
metadata:
  name: dev
  namespace: default
spec:
  region: us-east-1
  networkSpec:
    cni: {}
"""
