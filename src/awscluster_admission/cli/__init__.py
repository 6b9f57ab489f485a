"""Command-line interface for awscluster-admission."""

from __future__ import annotations
