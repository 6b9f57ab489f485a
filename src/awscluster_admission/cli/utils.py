"""CLI utility functions and error handling.

Shared helpers for the awscluster-admission CLI: exit codes, stderr/stdout
output helpers and manifest loading.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import click
import yaml
from pydantic import ValidationError

from awscluster_admission.schemas import AWSCluster

if TYPE_CHECKING:
    from pathlib import Path
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, missing required options)."""

    FILE_NOT_FOUND = 3
    """Required file or directory not found."""

    VALIDATION_ERROR = 5
    """Admission rejected the resource or the manifest is malformed."""


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Args:
        message: Error message to display.
        **context: Optional context key-value pairs to include.
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        full_message = f"Error: {message} ({context_str})"
    else:
        full_message = f"Error: {message}"

    click.echo(full_message, err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    error(message, **context)
    sys.exit(exit_code)


def success(message: str) -> None:
    """Print a result to stdout."""
    click.echo(message)


def info(message: str) -> None:
    """Print progress information to stderr."""
    click.echo(message, err=True)


class ManifestError(Exception):
    """A manifest file could not be read as an AWSCluster."""

    pass


def load_cluster(path: Path) -> AWSCluster:
    """Load an AWSCluster manifest from a YAML file.

    Args:
        path: Path to a single-document YAML manifest.

    Returns:
        The parsed cluster.

    Raises:
        ManifestError: If the file is empty, not YAML, not an AWSCluster,
            or does not match the schema.
    """
    try:
        data: Any = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ManifestError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"{path}: expected a mapping at the top level")
    kind = data.get("kind", "AWSCluster")
    if kind != "AWSCluster":
        raise ManifestError(f"{path}: expected kind AWSCluster, got {kind}")

    try:
        return AWSCluster.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"{path}: {e}") from e


def dump_cluster(cluster: AWSCluster) -> str:
    """Render a cluster as a YAML manifest."""
    return yaml.safe_dump(cluster.to_manifest(), sort_keys=False)


__all__ = [
    "ExitCode",
    "ManifestError",
    "dump_cluster",
    "error",
    "error_exit",
    "info",
    "load_cluster",
    "success",
]
