from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.filesystem.snapshot_repository import (
    FileSystemLayoutResultRepository,
    FileSystemSnapshotRepository,
)
from adapters.layout.spacetime import layout
from app.config import AppSettings, load_settings
from domain.services.build_display_rows import DiagramView

app = typer.Typer(no_args_is_help=True)
console = Console()


def _settings(config_path: Optional[Path]) -> AppSettings:
    try:
        return load_settings(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _view(settings: AppSettings, context: Optional[str], hide_non_participating: bool) -> DiagramView:
    view = settings.view.to_view()
    return DiagramView(
        activity_context=context if context is not None else view.activity_context,
        hide_non_participating=hide_non_participating or view.hide_non_participating,
    )


@app.command("layout")
def layout_snapshot(
    snapshot_path: Path = typer.Argument(..., help="Model snapshot JSON file."),
    output: Optional[Path] = typer.Option(None, help="Where to write the layout JSON."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    context: Optional[str] = typer.Option(None, help="Parent activity id to lay out."),
    hide_non_participating: bool = typer.Option(
        False, "--hide-non-participating", help="Drop rows without participations in view."
    ),
) -> None:
    settings = _settings(config)
    snapshots = FileSystemSnapshotRepository()
    results = FileSystemLayoutResultRepository()
    try:
        snapshot = snapshots.load_by_path(snapshot_path)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {snapshot_path}")
        raise typer.Exit(code=1) from exc
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid snapshot:[/] {exc}")
        raise typer.Exit(code=1) from exc

    view = _view(settings, context, hide_non_participating)
    if view.activity_context is not None and not snapshot.has_parts(view.activity_context):
        console.print(f"[yellow]Activity {view.activity_context} has no sub-activities[/]")

    result = layout(snapshot, settings.diagram, view)
    target_path = output or results.target_path(settings.layout_out_dir, snapshot_path)
    results.save(result, target_path)
    console.print(
        f"[green]Wrote[/] {target_path} "
        f"({len(result.shapes)} shapes, {result.canvas.width:g}x{result.canvas.height:g})"
    )


@app.command("layout-all")
def layout_all(
    input_dir: Optional[Path] = typer.Option(None, help="Directory with snapshot JSON files."),
    output_dir: Optional[Path] = typer.Option(None, help="Directory to write layout files."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    input_dir = input_dir or settings.snapshot_dir
    output_dir = output_dir or settings.layout_out_dir
    snapshots = FileSystemSnapshotRepository()
    results = FileSystemLayoutResultRepository()

    try:
        pairs = snapshots.load_all_with_paths(input_dir)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid snapshot:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if not pairs:
        console.print(f"[yellow]No snapshot files found in {input_dir}[/]")
        raise typer.Exit(code=0)

    view = settings.view.to_view()
    for path, snapshot in pairs:
        target_path = results.target_path(output_dir, path)
        results.save(layout(snapshot, settings.diagram, view), target_path)
        console.print(f"[green]Wrote[/] {target_path}")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Snapshot file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        snapshot = FileSystemSnapshotRepository().load_by_path(input_path)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]Valid snapshot:[/] {input_path} "
        f"({len(snapshot.individuals)} individuals, {len(snapshot.activities)} activities)"
    )


if __name__ == "__main__":
    app()
