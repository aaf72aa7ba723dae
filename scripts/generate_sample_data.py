#!/usr/bin/env python3
"""Generate a synthetic billing extract for validation.

Writes a gzip-compressed, pipe-delimited file of monthly meter reads for
electricity, gas and dual-fuel customers, optionally salted with malformed
lines, then runs the analysis over it and prints the summary.
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from billing_stats.analysis import analyze
from billing_stats.config import AnalysisConfig
from billing_stats.generators import BillingRecordGenerator
from billing_stats.logging import setup_logging
from billing_stats.sinks import GzipFileSink, format_record

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments; unset options fall back to the environment."""
    parser = argparse.ArgumentParser(description="Generate a synthetic billing extract")
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=project_root / "local" / "billing_sample.gz",
        help="Output .gz file (default: local/billing_sample.gz)",
    )
    parser.add_argument("--customers", type=int, help="Number of customers")
    parser.add_argument("--months", type=int, help="Months of reads per service")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument(
        "--invalid-rate",
        type=float,
        help="Fraction of lines to corrupt (0.0 to 1.0)",
    )
    parser.add_argument("--no-analyze", action="store_true", help="Skip the analysis pass")
    return parser.parse_args()


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    """Merge command line overrides onto the environment config."""
    config = AnalysisConfig.from_env()
    if args.customers is not None:
        config.generator.num_customers = args.customers
    if args.months is not None:
        config.generator.months = args.months
    if args.invalid_rate is not None:
        config.generator.invalid_line_rate = args.invalid_rate
    if args.seed is not None:
        config.seed = args.seed
    return config


def write_sample(config: AnalysisConfig, output: Path) -> tuple[int, int]:
    """Write the extract; return (lines written, lines corrupted)."""
    generator = BillingRecordGenerator(config.generator, seed=config.seed)
    delimiter = config.parser.delimiter
    corrupted = 0

    with GzipFileSink(output, delimiter=delimiter, encoding=config.parser.encoding) as sink:
        for record in generator.generate_batch():
            line = format_record(record, delimiter)
            if random.random() < config.generator.invalid_line_rate:
                line = generator.corrupt_line(line, delimiter)
                corrupted += 1
            sink.write_lines([line])
        written = sink.lines_written

    return written, corrupted


def main() -> None:
    """Generate the sample extract and summarize it."""
    args = parse_args()
    config = build_config(args)
    setup_logging(config.log_level, config.log_format)

    logger.info(
        "Generating %d customers x %d months (invalid rate %.1f%%)",
        config.generator.num_customers,
        config.generator.months,
        config.generator.invalid_line_rate * 100,
    )
    written, corrupted = write_sample(config, args.output)
    logger.info("Wrote %d lines (%d corrupted) to %s", written, corrupted, args.output)

    if args.no_analyze:
        return

    aggregator = analyze(args.output, config.parser)
    print(json.dumps(aggregator.summary(), indent=2))


if __name__ == "__main__":
    main()
