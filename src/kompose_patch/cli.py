"""Click CLI entry point for kompose-patch."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from kompose_patch.config import DEFAULT_TIMEOUT, OUTPUT_DIRNAME, POD_MANIFEST_SUFFIXES, ConvertOptions
from kompose_patch.output.terminal import render_folder_report, render_manifest_reports
from kompose_patch.pipeline import convert_tree, patch_directory


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option()
def main() -> None:
    """kompose-patch: serve compose config and credential files from ConfigMaps and Secrets."""


@main.command()
@click.argument("compose_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--output-dirname", default=OUTPUT_DIRNAME, show_default=True,
              help="Output folder created under COMPOSE_DIR")
@click.option("--manifest-suffix", multiple=True,
              help="File suffix of manifests to rewrite (default: -pod.yaml)")
@click.option("--kompose", "kompose_bin", default="kompose", help="kompose executable")
@click.option("--kubectl", "kubectl_bin", default="kubectl", help="kubectl executable")
@click.option("--timeout", default=DEFAULT_TIMEOUT, type=int, help="Per-command timeout in seconds")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def convert(
    compose_dir: Path,
    output_dirname: str,
    manifest_suffix: tuple[str, ...],
    kompose_bin: str,
    kubectl_bin: str,
    timeout: int,
    no_color: bool,
    verbose: bool,
) -> None:
    """Convert every compose project under COMPOSE_DIR and rewrite its manifests."""
    _configure_logging(verbose)
    options = ConvertOptions(
        output_dirname=output_dirname,
        manifest_suffixes=manifest_suffix or POD_MANIFEST_SUFFIXES,
        kompose_bin=kompose_bin,
        kubectl_bin=kubectl_bin,
        timeout=timeout,
    )

    reports = convert_tree(compose_dir, options)
    if not reports:
        click.echo(f"Error: no compose.yaml or docker-compose.yaml found under {compose_dir}", err=True)
        sys.exit(1)

    for report in reports:
        render_folder_report(report, no_color=no_color)

    if not all(r.ok for r in reports):
        sys.exit(1)


@main.command()
@click.argument("output_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--manifest-suffix", multiple=True,
              help="File suffix of manifests to rewrite (default: -pod.yaml)")
@click.option("--dry-run", is_flag=True, help="Show changes without writing or deleting files")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def patch(
    output_dir: Path,
    manifest_suffix: tuple[str, ...],
    dry_run: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Rewrite already generated manifests in OUTPUT_DIR."""
    _configure_logging(verbose)
    options = ConvertOptions(
        manifest_suffixes=manifest_suffix or POD_MANIFEST_SUFFIXES,
        dry_run=dry_run,
    )

    reports = patch_directory(output_dir, options)
    render_manifest_reports(reports, show_changes=dry_run, no_color=no_color)

    if not all(r.ok for r in reports):
        sys.exit(1)
