#!/usr/bin/env python3
"""
CLI tool for evaluating suggested-price accuracy on a historical quote export.

Every priced quote of the export is matched against all the others
(leave-one-out); the top match's suggested price is compared with the
quote's own price.

Usage:
    python scripts/evaluate_pricing.py --export data/shipping_quotes.csv
    python scripts/evaluate_pricing.py --export data/quotes.xlsx --min-price 1000 --max-price 6000 --output report.md

Output:
    - Markdown report with MAPE and within-10/20/30% accuracy
    - Worst and best predictions
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.domain.quoting.evaluation.pricing_evaluation import PricingEvaluator
from src.domain.quoting.matching_config import MatchingConfig
from src.domain.quoting.services.quote_matching_engine import QuoteMatchingEngine
from src.domain.shared.exceptions import DomainException
from src.infrastructure.file_storage.quote_export_reader import QuoteExportReader

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Evaluate suggested-price accuracy on a quote export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluate every priced quote
  python scripts/evaluate_pricing.py --export data/shipping_quotes.csv

  # Focus on standard mid-range quotes with a looser threshold
  python scripts/evaluate_pricing.py --export data/quotes.csv --min-price 1000 --max-price 6000 --min-score 0.3
        """,
    )

    parser.add_argument(
        "--export",
        type=Path,
        required=True,
        help="Path to quote export (.csv or .xlsx)",
    )
    parser.add_argument(
        "--min-score",
        type=float,
        default=None,
        help="Minimum similarity score (default: 0.5)",
    )
    parser.add_argument(
        "--max-matches",
        type=int,
        default=None,
        help="Matches considered per quote (default: 10)",
    )
    parser.add_argument(
        "--min-price",
        type=float,
        default=None,
        help="Only evaluate quotes priced at or above this",
    )
    parser.add_argument(
        "--max-price",
        type=float,
        default=None,
        help="Only evaluate quotes priced at or below this",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file path for report (default: stdout)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def main():
    """Main execution function."""
    args = parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Step 1: Load export
    logger.info(f"Loading quote export from {args.export}")
    try:
        quotes = QuoteExportReader().read(args.export)
    except FileNotFoundError:
        logger.error(f"Export not found: {args.export}")
        sys.exit(1)
    except DomainException as e:
        logger.error(f"Failed to load export: {e}")
        sys.exit(1)

    # Step 2: Build engine
    try:
        config = MatchingConfig.default().with_overrides(
            min_score=args.min_score, max_matches=args.max_matches
        )
    except DomainException as e:
        logger.error(f"Invalid matching options: {e}")
        sys.exit(1)
    evaluator = PricingEvaluator(QuoteMatchingEngine(config=config))

    def progress_callback(current: int, total: int):
        percentage = (current / total) * 100
        print(f"Progress: {current}/{total} ({percentage:.1f}%)", end="\r")

    # Step 3: Evaluate
    report = evaluator.evaluate(
        quotes,
        min_price=args.min_price,
        max_price=args.max_price,
        progress_callback=progress_callback,
    )
    print()

    # Step 4: Output report
    markdown_report = report.to_markdown()
    if args.output:
        args.output.write_text(markdown_report)
        logger.info(f"Report saved to {args.output}")
    else:
        print("\n" + "=" * 80)
        print(markdown_report)
        print("=" * 80)

    if report.evaluated == 0:
        logger.warning("No quotes could be evaluated")
        sys.exit(2)

    sys.exit(0)


if __name__ == "__main__":
    main()
