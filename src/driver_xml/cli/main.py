"""Main CLI entry point for the driver-xml command-line tool.

Parses one document and shows the indented tree, the compact re-serialization
and, on request, a hex dump of that serialization.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from driver_xml import __version__
from driver_xml.api.parser import parse_file, render_pretty
from driver_xml.serialization.writer import XmlWriter
from driver_xml.shared.config import ConfigError, DriverXmlConfig
from driver_xml.shared.errors import DriverXmlError
from driver_xml.shared.logging import configure_logging
from driver_xml.shared.result import DiagnosticSeverity
from driver_xml.tools.hexdump import hex_dump

EXIT_SUCCESS = 0
EXIT_PARSE_FAILURE = 1
EXIT_USAGE_ERROR = 2

PRESETS = {
    "default": DriverXmlConfig.default,
    "strict": DriverXmlConfig.strict,
    "permissive": DriverXmlConfig.permissive,
}


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="driver-xml",
        description="Parse an ASCII XML document, show its tree and re-serialize it"
    )

    parser.add_argument("--version", action="version", version=__version__)

    parser.add_argument(
        "file",
        type=Path,
        help="XML document to parse"
    )
    parser.add_argument(
        "--no-tree",
        action="store_true",
        help="Do not print the indented tree"
    )
    parser.add_argument(
        "--no-compact",
        action="store_true",
        help="Do not print the compact re-serialization"
    )
    parser.add_argument(
        "--hexdump",
        action="store_true",
        help="Print a hex dump of the compact re-serialization"
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Configuration preset (default: default)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file (overrides --preset)"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum element nesting depth"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> DriverXmlConfig:
    """Build the configuration selected on the command line.

    Raises:
        ConfigError: If the configuration file is unreadable or invalid
    """
    if args.config is not None:
        try:
            text = args.config.read_text()
        except OSError as e:
            raise ConfigError(f"Could not read config file {args.config}: {e}") from e
        config = DriverXmlConfig.from_json(text)
    else:
        config = PRESETS[args.preset]()

    if args.max_depth is not None:
        config = config.override(parser__max_nesting_depth=args.max_depth)
    return config


def _logging_level(args: argparse.Namespace, config: DriverXmlConfig) -> str:
    if args.verbose:
        return "DEBUG"
    if args.quiet:
        return "ERROR"
    return config.global_.logging_level


def cmd_show(args: argparse.Namespace, config: DriverXmlConfig) -> int:
    """Parse the file and print the requested views."""
    if not args.file.is_file():
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    result = parse_file(args.file, config=config)

    if not args.quiet:
        for diagnostic in result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING):
            print(f"Warning: {diagnostic.message}", file=sys.stderr)

    if not result.success or result.root is None:
        print(f"Error: {result.status.name}: {result.error}", file=sys.stderr)
        return EXIT_PARSE_FAILURE

    if not args.no_tree:
        print(render_pretty(result.root), end="")

    try:
        compact = XmlWriter(config.serializer).render_children(result.root)
    except DriverXmlError as e:
        print(f"Error: {e.status.name}: {e}", file=sys.stderr)
        return EXIT_PARSE_FAILURE

    if not args.no_compact:
        print(compact.decode("latin-1"))
    if args.hexdump:
        print(hex_dump(compact), end="")

    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    configure_logging(_logging_level(args, config))

    try:
        return cmd_show(args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
