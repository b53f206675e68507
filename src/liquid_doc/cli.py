"""Command-line interface for the LiquidDoc parser."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from liquid_doc.ast import LiquidAST
from liquid_doc.errors import GrammarError

OUTPUT_FORMATS = ("json", "debug")
CONFIG_FILENAME = "liquid-doc.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_format: str
    position_offset: int
    template: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="liquid-doc",
        description="Parse LiquidDoc comments into an AST",
    )
    p.add_argument("-i", "--input", help="Input file (default: stdin)")
    p.add_argument(
        "-f",
        "--format",
        default=None,
        metavar="FORMAT",
        help="Output format: json or debug (default: json)",
    )
    p.add_argument(
        "--offset",
        type=int,
        default=None,
        metavar="N",
        help="Add N to every position in the output (default: 0)",
    )
    p.add_argument(
        "--template",
        action="store_true",
        default=None,
        help="Treat input as a Liquid template and parse its {% doc %} blocks",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input) if args.input else None
    search_dir = input_file.parent if input_file is not None else Path(".")
    if not search_dir.parts:
        search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)
    cfg_output = config.get("output")
    if not isinstance(cfg_output, dict):
        cfg_output = {}

    output_format = "json"
    cfg_format = cfg_output.get("format")
    if cfg_format is not None:
        output_format = str(cfg_format)
    if args.format is not None:
        output_format = args.format
    if output_format not in OUTPUT_FORMATS:
        raise argparse.ArgumentTypeError(
            f"unsupported format: {output_format} (expected one of: {', '.join(OUTPUT_FORMATS)})"
        )

    position_offset = 0
    cfg_offset = cfg_output.get("offset")
    if cfg_offset is not None:
        if not isinstance(cfg_offset, int) or isinstance(cfg_offset, bool):
            raise argparse.ArgumentTypeError(f"invalid offset in config: {cfg_offset!r}")
        position_offset = cfg_offset
    if args.offset is not None:
        position_offset = args.offset
    if position_offset < 0:
        raise argparse.ArgumentTypeError(f"offset must be non-negative: {position_offset}")

    template = False
    cfg_template = cfg_output.get("template")
    if isinstance(cfg_template, bool):
        template = cfg_template
    if args.template is not None:
        template = args.template

    return CliOptions(
        input_file=input_file,
        output_format=output_format,
        position_offset=position_offset,
        template=template,
    )


def read_source(options: CliOptions) -> str:
    if options.input_file is None:
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def parse_source(options: CliOptions, source: str) -> LiquidAST:
    """Parse source as configured. Raises GrammarError on a mismatch."""
    from liquid_doc.parser import parse_or_raise, parse_template_or_raise

    if options.template:
        return parse_template_or_raise(source, options.position_offset)
    return parse_or_raise(source, options.position_offset)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from liquid_doc.debug import dump_ast
    from liquid_doc.serialize import to_json

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    try:
        source = read_source(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        ast = parse_source(options, source)
    except GrammarError as exc:
        filename = str(options.input_file) if options.input_file is not None else "<stdin>"
        print(exc.format(filename), file=sys.stderr)
        return 1

    if options.output_format == "json":
        sys.stdout.write(to_json(ast) + "\n")
    else:
        dump_ast(ast, file=sys.stdout)

    return 0


def run() -> None:
    sys.exit(main())
