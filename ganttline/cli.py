"""Command-line entry point: render a JSON task list to SVG.

Usage:
    ganttline render tasks.json -o chart.svg --view-mode Week
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ganttline.config import get_settings
from ganttline.dsl.schema import GanttOptions, TaskRecord
from ganttline.engine.gantt import Gantt
from ganttline.engine.svg_renderer import render_to_svg
from ganttline.engine.view_modes import ALL_VIEW_MODES

logger = logging.getLogger(__name__)


def load_tasks(path: Path) -> List[TaskRecord]:
    """Read a JSON list of task records (or an object with a "tasks" list)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("tasks", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of task records")
    return [TaskRecord.model_validate(item) for item in data]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ganttline", description="Gantt timeline renderer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render tasks to an SVG file")
    render.add_argument("tasks", type=Path, help="JSON file with task records")
    render.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output SVG path (default: print to stdout)",
    )
    render.add_argument(
        "--view-mode",
        choices=[mode.value for mode in ALL_VIEW_MODES],
        default=None,
        help="View mode (default: GANTT_DEFAULT_VIEW_MODE)",
    )
    render.add_argument(
        "--date-format",
        default=None,
        help="Date format of the task records (default: GANTT_DATE_FORMAT)",
    )
    return parser


def run_render(args: argparse.Namespace) -> int:
    overrides = {}
    if args.view_mode:
        overrides["view_mode"] = args.view_mode
    if args.date_format:
        overrides["date_format"] = args.date_format

    try:
        tasks = load_tasks(args.tasks)
        options = GanttOptions.from_settings(**overrides)
        gantt = Gantt(tasks, options)
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Cannot load input: {e}")
        return 1

    svg = render_to_svg(gantt.state, output_path=args.output)
    if args.output:
        logger.info(f"Wrote {len(gantt.bars)} bars to {args.output}")
    else:
        sys.stdout.write(svg)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    args = build_parser().parse_args(argv)
    if args.command == "render":
        return run_render(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
