"""Status lines and change previews for the terminal."""

from __future__ import annotations

import click

from kompose_patch.diff.engine import FieldChange, format_value
from kompose_patch.pipeline import FolderReport, ManifestReport, StatusEvent

_MARKERS: dict[str, tuple[str, str]] = {
    "created": ("✅", "green"),
    "patched": ("✅", "green"),
    "deleted": ("🗑️ ", "yellow"),
    "warning": ("⚠️ ", "yellow"),
    "error": ("❌", "red"),
}

_CHANGE_SIGILS: dict[str, tuple[str, str]] = {
    "item_added": ("+", "green"),
    "item_removed": ("-", "red"),
    "value_changed": ("~", "yellow"),
    "type_changed": ("~", "yellow"),
}


def render_event(event: StatusEvent, no_color: bool = False) -> None:
    marker, color = _MARKERS[event.status]
    line = f"{marker} {event.message}"
    click.secho(line, fg=None if no_color else color, err=event.status == "error")


def render_changes(changes: list[FieldChange], no_color: bool = False) -> None:
    for fc in changes:
        sigil, color = _CHANGE_SIGILS.get(fc.change_type, ("~", "yellow"))
        if fc.change_type == "item_added":
            detail = format_value(fc.new_value)
        elif fc.change_type == "item_removed":
            detail = format_value(fc.old_value)
        else:
            detail = f"{format_value(fc.old_value)} -> {format_value(fc.new_value)}"
        click.secho(f"    {sigil} {fc.path}: {detail}", fg=None if no_color else color)


def render_manifest_reports(
    reports: list[ManifestReport], show_changes: bool = False, no_color: bool = False
) -> None:
    for report in reports:
        for event in report.events:
            render_event(event, no_color=no_color)
        if show_changes and report.changes:
            render_changes(report.changes, no_color=no_color)


def render_folder_report(report: FolderReport, no_color: bool = False) -> None:
    for event in report.events:
        render_event(event, no_color=no_color)
    render_manifest_reports(report.manifests, no_color=no_color)
    if report.ok and report.output_dir is not None:
        click.echo(f"All done! Check the {report.output_dir} directory for generated manifests.")
