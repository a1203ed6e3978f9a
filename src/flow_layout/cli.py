"""Command-line entry point: flow JSON in, layout JSON out."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from flow_layout.api import layout_flow_json
from flow_layout.options import LayoutOptions

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="flow-layout",
        description="Compute node positions and edge routes for a flow description.",
    )
    parser.add_argument("input", help="Flow JSON file, or '-' for stdin")
    parser.add_argument("-o", "--output", help="Write layout JSON here instead of stdout")
    parser.add_argument("--row-spacing", type=float, help="Vertical gap between parent and child")
    parser.add_argument("--lane-spacing", type=float, help="Horizontal distance between lanes")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log layout diagnostics")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = LayoutOptions()
    if args.row_spacing is not None:
        options.row_spacing = args.row_spacing
    if args.lane_spacing is not None:
        options.lane_spacing = args.lane_spacing

    try:
        src = sys.stdin.read() if args.input == "-" else Path(args.input).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"flow-layout: cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    try:
        out = layout_flow_json(src, options, indent=args.indent)
    except json.JSONDecodeError as exc:
        print(f"flow-layout: invalid JSON in {args.input}: {exc}", file=sys.stderr)
        return 2

    if args.output:
        Path(args.output).write_text(out + "\n", encoding="utf-8")
        logger.debug("Wrote layout to %s", args.output)
    else:
        sys.stdout.write(out + "\n")
    return 0
