"""
Command-line interface.

    canvasflow diagram.canvas -d LR -c 1=#ff0000 -o diagram.mmd
    canvasflow diagram.canvas --hierarchy
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import RenderConfig, load_render_config
from .errors import ConfigError, ExitCode, as_exit_code
from .hierarchy import build_hierarchy
from .loader import load_canvas
from .logging import LogConfig, get_logger, setup_logging
from .serializer import render_flowchart
from .validator import VALID_DIRECTIONS

LOG = get_logger(__name__)


def _parse_color_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ConfigError(
                f"Invalid color override {pair!r}: expected INDEX=#RRGGBB"
            )
        colors[key.strip()] = value.strip()
    return colors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvasflow",
        description="Convert JSON Canvas files to Mermaid flowcharts",
    )
    parser.add_argument("input", help="Path to a .canvas file, or - for stdin")
    parser.add_argument("-o", "--output", type=Path, help="Write output to a file")
    parser.add_argument(
        "-d",
        "--direction",
        choices=VALID_DIRECTIONS,
        default=None,
        help="Flowchart direction (default TB)",
    )
    parser.add_argument(
        "-c",
        "--color",
        action="append",
        metavar="INDEX=HEX",
        help="Override a palette color, e.g. 1=#ff0000 (repeatable)",
    )
    parser.add_argument("--config", type=Path, help="Optional YAML/JSON config file")
    parser.add_argument(
        "--hierarchy",
        action="store_true",
        help="Write the containment hierarchy as JSON instead of a flowchart",
    )
    parser.add_argument(
        "--fence",
        action="store_true",
        help="Wrap the flowchart in a Markdown mermaid code fence",
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (INFO, DEBUG, ...)"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def convert(args: argparse.Namespace, config: RenderConfig) -> str:
    data = load_canvas(args.input)

    if args.hierarchy:
        return json.dumps(build_hierarchy(data), indent=2) + "\n"

    flowchart = render_flowchart(data, config.colors, config.direction)
    if args.fence:
        return f"```mermaid\n{flowchart}```\n"
    return flowchart


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_render_config(args.config).merged(
            direction=args.direction,
            colors=_parse_color_pairs(args.color),
            log_level=args.log_level,
        )
        setup_logging(
            LogConfig(level=config.log_level) if config.log_level else None
        )

        output = convert(args, config)
        if args.output:
            args.output.write_text(output, encoding="utf-8")
            LOG.info("Wrote %s", args.output)
        else:
            sys.stdout.write(output)
    except Exception as e:
        setup_logging(LogConfig())  # ensure something is configured
        LOG.error("Conversion failed: %s", e)
        return as_exit_code(e)
    return int(ExitCode.OK)


def run() -> None:
    sys.exit(main())
