#!/usr/bin/env python3
"""
Bernoulli Lift UQ: Main Entry Point
===================================

Usage:
    python main.py                              Deterministic configuration
    python main.py --configuration environment  Uncertain h, T and Rh
    python main.py all_angles.csv               Uncertain angle of attack
    python main.py --summary                    Show configuration summary

"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config import config, Configuration  # noqa: E402
from lift.errors import LiftModelError, MissingInputError  # noqa: E402
from lift.report import export_json, write_diagnostics  # noqa: E402
from lift.scenarios import LiftPipeline, build_inputs  # noqa: E402
from lift.table_loader import CoefficientTableLoader  # noqa: E402
from lift.uncertain import SamplingPolicy  # noqa: E402


def validate_config() -> bool:
    """Validate lift configuration."""
    print("Validating configuration...")
    errors = config.validate()

    if errors:
        print("\nCONFIGURATION ERRORS:")
        for err in errors:
            print(f"  [!] {err}")
        return False

    print("  Configuration valid.")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="NACA-2412 lift estimate with uncertainty propagation"
    )
    parser.add_argument(
        "table", nargs="?", type=Path,
        help="Multi-AOA pressure coefficient table (';' delimited, decimal comma)",
    )
    parser.add_argument(
        "--configuration",
        choices=[c.value for c in Configuration],
        help="Input configuration (default: aoa with a table, else deterministic)",
    )
    parser.add_argument(
        "--seed", type=int, default=config.sampling.seed,
        help="Base seed for sampled combinations",
    )
    parser.add_argument(
        "--samples", type=int, default=config.sampling.sample_count,
        help="Samples drawn per sampled combination",
    )
    parser.add_argument(
        "--uncertain-velocity", action="store_true",
        help="Treat the free-stream speed as Uniform over the valid range",
    )
    parser.add_argument("--report", type=Path, help="Write a JSON summary to this path")
    parser.add_argument(
        "--summary", action="store_true", help="Show configuration summary"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate configuration only"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.configuration:
        configuration = Configuration(args.configuration)
    else:
        configuration = Configuration.AOA if args.table else Configuration.DETERMINISTIC

    policy = SamplingPolicy(sample_count=args.samples, seed=args.seed)

    table = None
    if args.table is not None:
        table = CoefficientTableLoader().load(args.table, policy)
    elif configuration is Configuration.AOA:
        raise MissingInputError(
            "Please specify the coefficient table file as an input.",
            stage="input", quantity="table",
        )

    # Literal tables serve the fixed-AOA configurations
    if configuration is not Configuration.AOA:
        table = None

    inputs = build_inputs(configuration, table, policy, args.uncertain_velocity)
    result = LiftPipeline().run(inputs)
    write_diagnostics(result)

    if args.report:
        path = export_json(result, args.report)
        print(f"Report written to: {path}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.summary:
        print(config.summary())
        return 0

    if args.validate:
        return 0 if validate_config() else 1

    try:
        return run(args)
    except MissingInputError as exc:
        print(f"ERROR {exc}", file=sys.stderr)
        return 2
    except LiftModelError as exc:
        print(f"ERROR {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
