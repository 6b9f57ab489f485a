"""Main entry point for the awscluster-admission CLI.

Commands:
    awscluster-admission default: Print a manifest with defaults applied
    awscluster-admission validate: Run create or update admission on a manifest

Example:
    $ awscluster-admission default cluster.yaml
    $ awscluster-admission validate cluster.yaml --old persisted.yaml
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click
from pydantic import ValidationError

from awscluster_admission.cli.default import default_command
from awscluster_admission.cli.utils import ExitCode, error_exit
from awscluster_admission.cli.validate import validate_command
from awscluster_admission.config import get_settings
from awscluster_admission.telemetry.logging import configure_logging


def _get_version() -> str:
    """Get the package version, or 'unknown' if not installed."""
    try:
        return get_version("awscluster-admission")
    except PackageNotFoundError:
        return "unknown"


@click.group(
    name="awscluster-admission",
    help="Defaulting and validation for AWSCluster resources.",
    epilog="Use 'awscluster-admission <command> --help' for command-specific help.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(
    version=_get_version(),
    prog_name="awscluster-admission",
    message="%(prog)s %(version)s",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="YAML settings file.",
    metavar="PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """Load settings and configure logging for subcommands."""
    try:
        settings = get_settings(config_path)
    except ValidationError as e:
        error_exit(f"Invalid settings: {e}", exit_code=ExitCode.USAGE_ERROR)

    configure_logging(log_level or settings.log_level, json_output=settings.json_logs)
    ctx.obj = settings


cli.add_command(default_command)
cli.add_command(validate_command)


__all__: list[str] = ["cli"]
