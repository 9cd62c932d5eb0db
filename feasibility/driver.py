"""Command-line driver: print feasibility reports for catalog service sets."""

import argparse
import sys
from typing import List, Optional

import yaml

from feasibility.catalog import load_catalog
from feasibility.config import load_config, validate_config
from feasibility.errors import InvalidInput
from feasibility.logger import configure_logger, get_logger
from feasibility.report import RULE, analyze, format_report

LOGGER = get_logger("driver")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feasibility",
        description="Rate-monotonic feasibility tests for periodic service sets.",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--catalog", help="YAML catalog of service sets (default: bundled examples)")
    parser.add_argument(
        "--example", action="append", dest="examples", metavar="NAME",
        help="Only analyse this catalog entry (repeatable)",
    )
    parser.add_argument("--max-iterations", type=int, help="Completion time iteration cap (default: bounded by each deadline)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log algorithm diagnostics")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.catalog is not None:
            config["catalog"] = args.catalog
        if args.examples:
            config["examples"] = args.examples
        if args.max_iterations is not None:
            config["max_iterations"] = args.max_iterations
        if args.verbose:
            config["log_level"] = "DEBUG"
        validate_config(config)

        configure_logger(level=config["log_level"])
        catalog = load_catalog(config["catalog"])

        names = config["examples"] or list(catalog)
        unknown = [name for name in names if name not in catalog]
        if unknown:
            raise InvalidInput(f"unknown examples: {', '.join(unknown)}")
    except (InvalidInput, OSError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    for name in names:
        services = catalog[name]
        report = analyze(services, max_iterations=config["max_iterations"])
        if not report.exact_tests_agree:
            LOGGER.error("%s: exact tests disagree", name)
        print(RULE)
        print(format_report(name, services, report))
    print(RULE)

    LOGGER.info("Analysed %d service sets", len(names))
    return 0


if __name__ == "__main__":
    sys.exit(main())
