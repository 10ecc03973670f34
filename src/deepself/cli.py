"""Command-line interface for deepself."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from deepself.config.loader import load_cli_settings
from deepself.core.normalizer import is_error_result, result_text
from deepself.core.schema import OutputShape
from deepself.core.toolbox import DeepselfToolbox
from deepself.logger import DEFAULT_LOG_FILE, setup_logging
from deepself.tools import build_tool_definitions


def parse_assignments(assignments: Optional[Sequence[str]]) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; values that read as JSON are decoded."""
    arguments: Dict[str, Any] = {}
    for item in assignments or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got: {item!r}")
        try:
            decoded = json.loads(value)
        except ValueError:
            decoded = value
        # Bare scalars stay strings so "28" is not sent as a number.
        arguments[key] = decoded if isinstance(decoded, (dict, list)) else value
    return arguments


def build_call_arguments(args: argparse.Namespace) -> Dict[str, Any]:
    arguments: Dict[str, Any] = {}
    if args.json_args:
        try:
            loaded = json.loads(args.json_args)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid --json payload: {exc}") from exc
        if not isinstance(loaded, dict):
            raise argparse.ArgumentTypeError("--json payload must be a JSON object")
        arguments.update(loaded)
    arguments.update(parse_assignments(args.assign))
    return arguments


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="deepself",
        description="Create, train, and chat with deepself models from the terminal.",
    )
    parser.add_argument("--config", help="Path to a config.toml file.")
    parser.add_argument("--base-url", dest="base_url", help="Override the API base URL.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    parser.add_argument(
        "--log-file",
        nargs="?",
        const=DEFAULT_LOG_FILE,
        default=None,
        help=f"Write logs to a file (default when given without a path: {DEFAULT_LOG_FILE}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("tools", help="List the available tools.")

    call_parser = subparsers.add_parser("call", help="Invoke one tool.")
    call_parser.add_argument("tool", help="Tool name, e.g. deepself_list.")
    call_parser.add_argument(
        "-a",
        "--arg",
        dest="assign",
        action="append",
        metavar="KEY=VALUE",
        help="Tool argument; repeat for several. JSON objects and arrays are decoded.",
    )
    call_parser.add_argument(
        "--json",
        dest="json_args",
        metavar="OBJECT",
        help="Tool arguments as one JSON object.",
    )
    call_parser.add_argument(
        "--structured",
        action="store_true",
        help="Return the structured envelope, printed as JSON.",
    )
    return parser.parse_args(argv)


def render_tools_table(schemas: List[Dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Tool", style="bold")
    table.add_column("Required Params")
    table.add_column("Optional Params")
    table.add_column("Description")

    for schema in schemas:
        parameters = schema.get("parameters") or {}
        properties = parameters.get("properties") or {}
        required = list(parameters.get("required") or [])
        optional = [name for name in properties if name not in required]
        table.add_row(
            schema["name"],
            ", ".join(required) or "-",
            ", ".join(optional) or "-",
            schema.get("description", ""),
        )
    return table


def _build_toolbox(args: argparse.Namespace, structured: bool = False) -> DeepselfToolbox:
    overrides: Dict[str, Any] = {"base_url": args.base_url}
    if structured:
        overrides["output_shape"] = OutputShape.STRUCTURED.value
        overrides["tool_output_shapes"] = {}
    settings = load_cli_settings(args.config, **overrides)
    toolbox = DeepselfToolbox(settings)
    toolbox.register_all(build_tool_definitions())
    return toolbox


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    console = Console()

    if args.command == "tools":
        toolbox = _build_toolbox(args)
        try:
            console.print(render_tools_table(toolbox.schemas()))
        finally:
            toolbox.close()
        return 0

    try:
        arguments = build_call_arguments(args)
    except argparse.ArgumentTypeError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        return 2

    toolbox = _build_toolbox(args, structured=args.structured)
    try:
        result = toolbox.invoke(args.tool, arguments)
    finally:
        toolbox.close()

    if args.structured:
        console.print_json(json.dumps(result))
    else:
        console.print(result_text(result), markup=False, highlight=False)
    return 1 if is_error_result(result) else 0


if __name__ == "__main__":
    sys.exit(main())
