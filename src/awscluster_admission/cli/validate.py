"""Validate command implementation.

Runs the admission write path on a manifest: the create path by default,
or the update path when the persisted manifest is given with --old.

Example:
    $ awscluster-admission validate cluster.yaml
    $ awscluster-admission validate cluster.yaml --old persisted.yaml
"""

from __future__ import annotations

from pathlib import Path

import click

from awscluster_admission.cli.utils import (
    ExitCode,
    ManifestError,
    error_exit,
    info,
    load_cluster,
    success,
)
from awscluster_admission.config import AdmissionSettings
from awscluster_admission.errors import ClusterValidationError
from awscluster_admission.schemas import AWSCluster
from awscluster_admission.webhook import AWSClusterWebhook, Operation


def _load_or_exit(path: Path) -> AWSCluster:
    if not path.exists():
        error_exit("File not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(path))
    try:
        return load_cluster(path)
    except ManifestError as e:
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)


@click.command(
    name="validate",
    help="Run create (or, with --old, update) admission on an AWSCluster manifest.",
    epilog="""
Exit codes:
    0  admitted
    3  manifest file not found
    5  rejected, or manifest malformed
""",
)
@click.argument(
    "manifest",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
)
@click.option(
    "--old",
    "old_manifest",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Persisted manifest; validates MANIFEST as an update of it.",
    metavar="PATH",
)
@click.pass_obj
def validate_command(
    settings: AdmissionSettings | None,
    manifest: Path,
    old_manifest: Path | None,
) -> None:
    """Admit a manifest, reporting every field error on rejection.

    Args:
        settings: Settings loaded by the command group.
        manifest: Path to the incoming AWSCluster manifest.
        old_manifest: Optional path to the persisted manifest.
    """
    cluster = _load_or_exit(manifest)
    old = _load_or_exit(old_manifest) if old_manifest is not None else None
    operation = Operation.UPDATE if old is not None else Operation.CREATE

    info(f"Running {operation.value} admission on: {manifest}")

    webhook = AWSClusterWebhook(settings=settings)
    try:
        webhook.admit(operation, cluster, old=old)
    except ClusterValidationError as e:
        for field_error in e.field_errors:
            click.echo(f"Error: {field_error}", err=True)
        error_exit(
            f"Admission denied with {len(e.field_errors)} error(s)",
            exit_code=ExitCode.VALIDATION_ERROR,
        )

    success(f"{cluster.kind} {cluster.metadata.name!r} admitted ({operation.value})")


__all__: list[str] = ["validate_command"]
