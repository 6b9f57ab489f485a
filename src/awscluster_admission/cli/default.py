"""Default command implementation.

Prints an AWSCluster manifest with computed fields filled in, the way the
defaulting webhook would store it.

Example:
    $ awscluster-admission default cluster.yaml > defaulted.yaml
"""

from __future__ import annotations

from pathlib import Path

import click

from awscluster_admission.cli.utils import (
    ExitCode,
    ManifestError,
    dump_cluster,
    error_exit,
    load_cluster,
    success,
)
from awscluster_admission.config import AdmissionSettings
from awscluster_admission.webhook import AWSClusterWebhook


@click.command(
    name="default",
    help="Print an AWSCluster manifest with defaults applied.",
)
@click.argument(
    "manifest",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
)
@click.pass_obj
def default_command(settings: AdmissionSettings | None, manifest: Path) -> None:
    """Apply defaulting to a manifest and print the result as YAML.

    Args:
        settings: Settings loaded by the command group.
        manifest: Path to the AWSCluster manifest.
    """
    if not manifest.exists():
        error_exit("File not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(manifest))

    try:
        cluster = load_cluster(manifest)
    except ManifestError as e:
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)

    webhook = AWSClusterWebhook(settings=settings)
    webhook.default(cluster)
    success(dump_cluster(cluster).rstrip("\n"))


__all__: list[str] = ["default_command"]
