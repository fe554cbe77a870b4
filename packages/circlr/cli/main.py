"""Command-line interface for circlr.

Runs the layout core outside a design tool: prints placements, preview
geometry or the resolved skip set for a given element and parameters.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.table import Table

from circlr.core.config.loader import load_plugin_config
from circlr.core.config.models import PluginConfig
from circlr.core.layout.engine import circle_center, compute_placements
from circlr.core.layout.errors import ERROR_MESSAGES, InvalidParameterError
from circlr.core.layout.models import (
    BoundingBox,
    EveryNthSkip,
    LayoutParameters,
    NoSkip,
    Pose,
    SkipPolicy,
    SpecificSkip,
)
from circlr.core.layout.skip import check_skip_policy, describe_policy, resolve_skipped
from circlr.core.layout.sweep import adaptive_radius, sweep_percentage
from circlr.core.preview.projector import PreviewProjector
from circlr.core.utils.json import dumps_json, write_json
from circlr.core.utils.logging import configure_logging, get_logger

console = Console()


def parse_skip_specific(value: str) -> frozenset[int]:
    """Parse ``"2,4,7"`` into instance numbers; blanks are ignored."""
    numbers: set[int] = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            number = int(part)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"not an instance number: {part!r}") from e
        if number < 1:
            raise argparse.ArgumentTypeError(f"instance numbers start at 1, got {number}")
        numbers.add(number)
    return frozenset(numbers)


def build_skip_policy(args: argparse.Namespace) -> SkipPolicy:
    if args.skip_specific is not None:
        return SpecificSkip(indices=args.skip_specific)
    if args.skip_every is not None:
        return EveryNthSkip(n=args.skip_every)
    return NoSkip()


def build_inputs(
    args: argparse.Namespace, config: PluginConfig
) -> tuple[BoundingBox, Pose, LayoutParameters]:
    """Turn parsed arguments into engine inputs, filling gaps from the config."""
    box = BoundingBox(width=args.width, height=args.height)
    pose = Pose(x=args.x, y=args.y, rotation_deg=args.rotation)

    defaults = config.defaults
    radius = args.radius
    if radius is None:
        radius = adaptive_radius(box) if defaults.adaptive_radius else 0.0

    params = LayoutParameters(
        count=args.count if args.count is not None else defaults.count,
        radius=radius,
        sweep_angle_deg=args.sweep if args.sweep is not None else defaults.sweep_angle_deg,
        align_radially=defaults.align_radially and not args.no_align,
        skip_policy=build_skip_policy(args),
    )
    return box, pose, params


def _write_payload(args: argparse.Namespace, payload: dict[str, Any]) -> bool:
    """Write the JSON payload where requested; True when the table should be skipped."""
    if args.output:
        write_json(args.output, payload)
    if args.json:
        print(dumps_json(payload))
        return True
    if args.output:
        console.print(f"[green]Wrote {args.output}[/green]")
    return False


def _summary(params: LayoutParameters) -> str:
    percentage = sweep_percentage(params.sweep_angle_deg, params.count)
    return (
        f"{params.count} instances, radius {params.radius:g}, "
        f"sweep {params.sweep_angle_deg:g}° ({percentage:.0f}%), "
        f"{'aligned' if params.align_radially else 'fixed rotation'}, "
        f"{describe_policy(params.skip_policy)}"
    )


def run_place(args: argparse.Namespace, config: PluginConfig) -> int:
    """Print the placement of every instance."""
    box, pose, params = build_inputs(args, config)
    placements = compute_placements(box, pose, params)
    skipped = resolve_skipped(params)
    center = circle_center(box, pose, params)

    rows: list[dict[str, Any]] = []
    for placement in placements:
        cx, cy = placement.center(box)
        rows.append(
            {
                "number": placement.number,
                "x": placement.x,
                "y": placement.y,
                "rotation": placement.rotation_deg,
                "center": [cx, cy],
                "matrix": placement.affine.as_rows(),
                "skipped": placement.number in skipped,
            }
        )

    if _write_payload(args, {"circle_center": list(center), "placements": rows}):
        return 0

    table = Table(title=_summary(params))
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("rotation", justify="right")
    table.add_column("center", justify="right")
    table.add_column("")
    for row in rows:
        table.add_row(
            str(row["number"]),
            f"{row['x']:.2f}",
            f"{row['y']:.2f}",
            f"{row['rotation']:.2f}°",
            f"({row['center'][0]:.2f}, {row['center'][1]:.2f})",
            "[dim]skipped[/dim]" if row["skipped"] else "",
        )
    console.print(table)
    console.print(f"Circle center: ({center[0]:.2f}, {center[1]:.2f})")
    return 0


def run_preview(args: argparse.Namespace, config: PluginConfig) -> int:
    """Print the preview geometry as the UI would draw it."""
    box, pose, params = build_inputs(args, config)
    projector = PreviewProjector(ui_width=config.ui.width, padding=config.ui.preview_padding)
    frame = projector.project(box, pose.rotation_deg, params)

    if _write_payload(args, frame.model_dump(mode="json")):
        return 0

    table = Table(title=f"Preview {frame.ui_width:g}px, scale 1:{frame.scale_factor:.3f}")
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("angle", justify="right")
    table.add_column("rotation", justify="right")
    table.add_column("")
    for item in frame.items:
        table.add_row(
            str(item.number),
            f"{item.x:.2f}",
            f"{item.y:.2f}",
            f"{item.angle_deg:.2f}°",
            f"{item.rotation_deg:.2f}°",
            "[dim]skipped[/dim]" if item.skipped else "",
        )
    console.print(table)
    console.print(
        f"Container {frame.container_width:.2f} x {frame.container_height:.2f} "
        f"at ({frame.container_x:.2f}, {frame.container_y:.2f})"
    )
    return 0


def run_skip(args: argparse.Namespace, config: PluginConfig) -> int:
    """Print the resolved skip set and whether the policy is acceptable."""
    _, _, params = build_inputs(args, config)
    skipped = sorted(resolve_skipped(params))
    violation = check_skip_policy(params)

    payload = {
        "policy": describe_policy(params.skip_policy),
        "skipped": skipped,
        "visible": params.count - len(skipped),
        "error": violation.value if violation else None,
    }
    if _write_payload(args, payload):
        return 1 if violation else 0

    console.print(f"Policy: {describe_policy(params.skip_policy)}")
    console.print(f"Skipped: {', '.join(map(str, skipped)) or 'none'}")
    console.print(f"Visible: {params.count - len(skipped)} of {params.count}")
    if violation:
        console.print(f"[red]{ERROR_MESSAGES[violation]}[/red]")
        return 1
    console.print("[green]OK[/green]")
    return 0


def _add_layout_arguments(p: argparse.ArgumentParser) -> None:
    element = p.add_argument_group("element")
    element.add_argument("--width", type=float, default=100.0, help="Element width (default: 100)")
    element.add_argument(
        "--height", type=float, default=100.0, help="Element height (default: 100)"
    )
    element.add_argument("--x", type=float, default=0.0, help="Element x position")
    element.add_argument("--y", type=float, default=0.0, help="Element y position")
    element.add_argument("--rotation", type=float, default=0.0, help="Element rotation in degrees")

    layout = p.add_argument_group("layout")
    layout.add_argument("--count", type=int, help="Number of instances (default: from config)")
    layout.add_argument("--radius", type=float, help="Circle radius (default: adaptive)")
    layout.add_argument("--sweep", type=float, help="Sweep angle (default: full circle)")
    layout.add_argument(
        "--no-align", action="store_true", help="Keep the original rotation on every instance"
    )
    skip = layout.add_mutually_exclusive_group()
    skip.add_argument(
        "--skip-specific",
        type=parse_skip_specific,
        metavar="N[,N...]",
        help="Comma-separated instance numbers to skip",
    )
    skip.add_argument("--skip-every", type=int, metavar="N", help="Skip every N-th instance")

    p.add_argument("--config", help="Path to config file (.json/.yaml; default: circlr.yaml)")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    p.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    p.add_argument("--output", help="Also write the JSON result to this file")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="circlr",
        description="circlr - radial pattern layout for design tools",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    place = sub.add_parser("place", help="Compute instance placements")
    _add_layout_arguments(place)
    place.set_defaults(handler=run_place)

    preview = sub.add_parser("preview", help="Compute the UI preview geometry")
    _add_layout_arguments(preview)
    preview.set_defaults(handler=run_preview)

    skip = sub.add_parser("skip", help="Resolve and check a skip policy")
    _add_layout_arguments(skip)
    skip.set_defaults(handler=run_skip)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = load_plugin_config(args.config)
    except Exception as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    log_config = config.logging
    configure_logging(
        level=args.log_level or log_config.level,
        format_string=log_config.format,
        filename=log_config.filename,
        structured=log_config.structured,
    )
    command_logger = get_logger(__name__, command=args.cmd)
    command_logger.debug(f"Running {args.cmd}")

    try:
        return args.handler(args, config)
    except InvalidParameterError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 2
    except ValueError as e:
        console.print(f"[red]ERROR: Invalid input: {e}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
