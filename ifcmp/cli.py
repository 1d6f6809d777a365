#!/usr/bin/env python3
"""
ifcmp CLI - Check a README's Go interface block against the real declaration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .comparator import check_interface
from .errors import IfcmpError, UsageError
from .reporter import Reporter, ReportConfig

logger = logging.getLogger(__name__)

USAGE = "Usage: ifcmp [options] <README.md> <interface.go> <interface>"
DEFAULT_CONFIG = Path(".ifcmp.json")
DEFAULTS: Dict[str, Any] = {
    "language": "go",
    "strict": False,
    "format": "text",
}
OPTION_TYPES = {
    "language": str,
    "strict": bool,
    "format": str,
}


class ArgumentParser(argparse.ArgumentParser):
    """argparse that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> None:
        raise UsageError(message)


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    parser = ArgumentParser(
        prog="ifcmp",
        description="Verify that the Go interface documented in a README matches the source.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare the Client interface
  ifcmp README.md client.go Client

  # Annotate a pull request from GitHub Actions
  ifcmp README.md client.go Client --format github

  # Compare map/chan/func types by their source text too
  ifcmp README.md client.go Client --strict
        """
    )

    parser.add_argument(
        "readme",
        type=Path,
        help="Markdown file containing the documented interface"
    )

    parser.add_argument(
        "source",
        type=Path,
        help="Go source file declaring the interface"
    )

    parser.add_argument(
        "interface",
        help="Name of the interface type"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (defaults to stdout)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=list(Reporter.FORMATS),
        default=None,
        help="Output format (default: text)"
    )

    parser.add_argument(
        "--language",
        default=None,
        help="Fenced code block tag to look for (default: go)"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Compare types ifcmp cannot render (maps, channels, funcs) by source text"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (.ifcmp.json)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging and a trace of the run on stderr"
    )

    return parser.parse_args(args)


def load_config(config_path: Optional[Path]) -> dict:
    """Load configuration from file if provided."""
    path = config_path if config_path else DEFAULT_CONFIG
    if config_path and not config_path.exists():
        raise IfcmpError("config file does not exist", path=str(config_path))
    if not path.exists():
        return {}
    try:
        with open(path, encoding='utf-8') as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        raise IfcmpError(f"invalid config file: {e}", path=str(path)) from e
    if not isinstance(config, dict):
        raise IfcmpError("config file must contain a JSON object", path=str(path))
    logger.debug("Loaded config from %s", path)
    return config


def resolve_options(parsed: argparse.Namespace, config: dict) -> Dict[str, Any]:
    """CLI flag, then config file, then built-in default."""
    options = {}
    for key, default in DEFAULTS.items():
        value = getattr(parsed, key)
        if value is None:
            value = config.get(key, default)
            if not isinstance(value, OPTION_TYPES[key]):
                raise IfcmpError(f"config option '{key}' must be a {OPTION_TYPES[key].__name__}, "
                                 f"got {json.dumps(value)}")
        options[key] = value
    if options["format"] not in Reporter.FORMATS:
        raise IfcmpError(f"unknown format in config: {options['format']}")
    return options


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    try:
        parsed = parse_args(args)
    except UsageError as e:
        print(USAGE, file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    setup_logging(parsed.verbose)

    try:
        options = resolve_options(parsed, load_config(parsed.config))

        if parsed.verbose:
            print(f"Checking {parsed.interface}: {parsed.source} against {parsed.readme}",
                  file=sys.stderr)

        check = check_interface(
            parsed.readme,
            parsed.source,
            parsed.interface,
            language=options["language"],
            strict=options["strict"],
        )
    except IfcmpError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reporter = Reporter(ReportConfig(include_trace=parsed.verbose))

    if parsed.output:
        try:
            reporter.write(check, parsed.output, options["format"])
        except OSError as e:
            print(f"Error: cannot write report: {e}", file=sys.stderr)
            return 1
        if parsed.verbose:
            print(f"Report written to: {parsed.output}", file=sys.stderr)
    else:
        sys.stdout.write(reporter.generate(check, options["format"]))

    if parsed.verbose:
        print(check.trace.render(), file=sys.stderr)

    return 0 if check.ok else 1


if __name__ == "__main__":
    sys.exit(main())
