"""Command-line interface for Formata.

Inspects saved projects and preset geometry without opening the editor.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from formata.core.config.loader import configure_logging_from_config, load_app_config
from formata.core.config.models import AppConfig
from formata.core.errors import FormataError
from formata.core.io.snapshot import ProjectSnapshot, load_project
from formata.core.presets.geometry import (
    PresetNotFoundError,
    generate_preset,
    list_presets,
    normalize_key,
    resolve_preset_name,
)
from formata.core.store.formation_store import FormationStore
from formata.core.utils.logging import get_logger

console = Console()


def _open_project(path: str, config: AppConfig) -> tuple[ProjectSnapshot, FormationStore]:
    snapshot = load_project(Path(path).resolve())
    store = FormationStore(config.editor, performers=snapshot.performers, frames=snapshot.frames)
    get_logger(__name__, project=snapshot.name).debug(
        f"Opened {len(store.performers)} performers and {len(store.frames)} frames"
    )
    return snapshot, store


def cmd_presets(args: argparse.Namespace, config: AppConfig) -> int:
    """List available presets."""
    table = Table(title="Presets")
    table.add_column("Name", style="bold")
    table.add_column("Key", style="dim")
    for name in list_presets():
        table.add_row(name, normalize_key(name))
    console.print(table)
    return 0


def cmd_preset(args: argparse.Namespace, config: AppConfig) -> int:
    """Print the coordinates of one preset."""
    name = resolve_preset_name(args.name)
    coords = generate_preset(name, args.count, args.scale)

    table = Table(title=f"{name} (count={args.count}, scale={args.scale})")
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for i, pos in enumerate(coords, start=1):
        table.add_row(str(i), f"{pos.x:.2f}", f"{pos.y:.2f}")
    console.print(table)
    return 0


def cmd_evaluate(args: argparse.Namespace, config: AppConfig) -> int:
    """Print every on-stage performer's position at a time."""
    _, store = _open_project(args.project, config)
    positions = store.evaluate(args.at)

    table = Table(title=f"Positions at {args.at:.0f}ms")
    table.add_column("Performer", style="bold")
    table.add_column("Label")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for performer in store.performers:
        pos = positions.get(performer.id)
        if pos is None:
            continue
        table.add_row(
            escape(performer.name),
            f"{performer.glyph} {escape(performer.label)}",
            f"{pos.x:.2f}",
            f"{pos.y:.2f}",
        )
    console.print(table)

    off_stage = len(store.performers) - len(positions)
    if off_stage > 0:
        console.print(f"[dim]{off_stage} performer(s) off stage[/dim]")
    return 0


def cmd_gaps(args: argparse.Namespace, config: AppConfig) -> int:
    """Print the transitions between frame holds."""
    _, store = _open_project(args.project, config)
    names = {f.id: escape(f.name) for f in store.frames}
    gaps = store.gaps()

    if not gaps:
        console.print("[yellow]No transitions: every frame is back-to-back.[/yellow]")
        return 0

    table = Table(title="Transitions")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Start (ms)", justify="right")
    table.add_column("End (ms)", justify="right")
    table.add_column("Duration (ms)", justify="right")
    for gap in gaps:
        table.add_row(
            names.get(gap.prev_id, "(start)"),
            names.get(gap.next_id, gap.next_id),
            f"{gap.start_ms:.0f}",
            f"{gap.end_ms:.0f}",
            f"{gap.duration_ms:.0f}",
        )
    console.print(table)
    return 0


def cmd_info(args: argparse.Namespace, config: AppConfig) -> int:
    """Print a project summary."""
    snapshot, store = _open_project(args.project, config)
    timeline = store.timeline()

    console.print(f"[bold]{escape(snapshot.name)}[/bold] (version {snapshot.version})")
    if snapshot.created_at is not None:
        console.print(f"Created: {snapshot.created_at.isoformat()}")
    music = escape(snapshot.music_name) if snapshot.music_name else "[dim]none[/dim]"
    console.print(f"Music: {music}")
    console.print(f"Performers: {len(store.performers)}")
    console.print(f"Frames: {len(timeline)}")
    console.print(f"Extent: {timeline.total_extent():.0f}ms")
    console.print(f"Transitions: {len(store.gaps())}")
    return 0


COMMANDS = {
    "presets": cmd_presets,
    "preset": cmd_preset,
    "evaluate": cmd_evaluate,
    "gaps": cmd_gaps,
    "info": cmd_info,
}


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="formata",
        description="Formata - formation choreography editor tools",
    )
    p.add_argument(
        "--app-config",
        default=None,
        help="Path to app config (JSON or YAML; default: formata.yaml if present)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("presets", help="List preset formations")

    preset = sub.add_parser("preset", help="Print coordinates for a preset")
    preset.add_argument("name", help="Preset name (e.g. 'circle_outline')")
    preset.add_argument("--count", type=int, default=8, help="Number of performers")
    preset.add_argument("--scale", type=float, default=1.0, help="Size multiplier")

    evaluate = sub.add_parser("evaluate", help="Show positions at a time")
    evaluate.add_argument("project", help="Path to project JSON")
    evaluate.add_argument("--at", type=float, required=True, help="Time in ms")

    gaps = sub.add_parser("gaps", help="List transitions between frames")
    gaps.add_argument("project", help="Path to project JSON")

    info = sub.add_parser("info", help="Summarize a project")
    info.add_argument("project", help="Path to project JSON")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = load_app_config(args.app_config)
        configure_logging_from_config(config)
        return COMMANDS[args.cmd](args, config)
    except PresetNotFoundError as e:
        console.print(f"[red]ERROR: {escape(str(e.args[0]))}[/red]")
        return 1
    except FileNotFoundError as e:
        console.print(f"[red]ERROR: File not found: {escape(str(e.filename or e))}[/red]")
        return 1
    except (FormataError, ValueError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
