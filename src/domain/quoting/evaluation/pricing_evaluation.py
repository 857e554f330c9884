"""
Pricing Evaluation (leave-one-out).

Measures how close suggested prices come to the prices that were actually
quoted, using the historical store itself as the test set:

    For every priced quote, match it against all other priced quotes, take
    the top match's suggested price and compare it with the quote's own
    preferred price.

Metrics:
    - MAPE: mean absolute percentage error over evaluated quotes
    - Within 10% / 20% / 30%: share of suggestions inside each error band
    - Worst / best cases for manual inspection

Usage:
    >>> evaluator = PricingEvaluator(QuoteMatchingEngine())
    >>> report = evaluator.evaluate(quotes, min_price=1000, max_price=6000)
    >>> print(report.to_markdown())
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.services.matching_engine import QuoteMatchingEngineProtocol

logger = logging.getLogger(__name__)

ERROR_BANDS: tuple[float, ...] = (0.10, 0.20, 0.30)
DEFAULT_CASES_SHOWN = 5


# ============================================================================
# DATA STRUCTURES
# ============================================================================


@dataclass
class PricingCase:
    """
    One evaluated quote.

    Attributes:
        quote_id: Quote whose price was predicted
        actual_price: Its own preferred price
        suggested_price: Price suggested from the top match
        matched_quote_id: Quote the suggestion came from
        similarity_score: Score of the top match
        error: |suggested - actual| / actual
        service_type: Service type of the evaluated quote
    """

    quote_id: int
    actual_price: float
    suggested_price: float
    matched_quote_id: int
    similarity_score: float
    error: float
    service_type: Optional[str] = None


@dataclass
class PricingEvaluationReport:
    """
    Leave-one-out evaluation report.

    Attributes:
        cases: Evaluated quotes
        skipped: Quotes in range for which no priced match was found
        min_price: Lower price filter used (None = unbounded)
        max_price: Upper price filter used (None = unbounded)
    """

    cases: list[PricingCase] = field(default_factory=list)
    skipped: int = 0
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    @property
    def evaluated(self) -> int:
        return len(self.cases)

    @property
    def mean_absolute_percentage_error(self) -> float:
        if not self.cases:
            return 0.0
        return sum(case.error for case in self.cases) / len(self.cases)

    def within(self, band: float) -> int:
        """Number of cases whose error is <= band."""
        return sum(1 for case in self.cases if case.error <= band)

    def within_rate(self, band: float) -> float:
        return self.within(band) / self.evaluated if self.cases else 0.0

    def worst(self, count: int = DEFAULT_CASES_SHOWN) -> list[PricingCase]:
        return sorted(self.cases, key=lambda case: case.error, reverse=True)[:count]

    def best(self, count: int = DEFAULT_CASES_SHOWN) -> list[PricingCase]:
        return sorted(self.cases, key=lambda case: case.error)[:count]

    def to_markdown(self) -> str:
        """
        Generate markdown report.

        Examples:
            >>> print(PricingEvaluationReport().to_markdown())
            # Pricing Evaluation Report
            ...
        """
        lines = ["# Pricing Evaluation Report", ""]
        lines.append(f"**Evaluated**: {self.evaluated}")
        lines.append(f"**Skipped (no priced match)**: {self.skipped}")
        if self.min_price is not None or self.max_price is not None:
            lower = "-" if self.min_price is None else f"{self.min_price:,.2f}"
            upper = "-" if self.max_price is None else f"{self.max_price:,.2f}"
            lines.append(f"**Price Range**: {lower} .. {upper}")
        lines.append("")

        if not self.cases:
            lines.append("No evaluations performed.")
            return "\n".join(lines)

        lines.append("## Accuracy")
        lines.append("")
        lines.append(f"- **MAPE**: {self.mean_absolute_percentage_error:.2%}")
        for band in ERROR_BANDS:
            lines.append(
                f"- **Within {band:.0%}**: {self.within(band)}/{self.evaluated} "
                f"({self.within_rate(band):.1%})"
            )
        lines.append("")

        for title, cases in (
            ("Worst Predictions", self.worst()),
            ("Best Predictions", self.best()),
        ):
            lines.append(f"## {title}")
            lines.append("")
            lines.append("| Quote | Service | Actual | Suggested | Matched | Score | Error |")
            lines.append("|-------|---------|--------|-----------|---------|-------|-------|")
            for case in cases:
                lines.append(
                    f"| {case.quote_id} | {case.service_type or 'N/A'} "
                    f"| {case.actual_price:,.2f} | {case.suggested_price:,.2f} "
                    f"| {case.matched_quote_id} | {case.similarity_score:.4f} "
                    f"| {case.error:.1%} |"
                )
            lines.append("")

        return "\n".join(lines)


# ============================================================================
# EVALUATOR
# ============================================================================


class PricingEvaluator:
    """
    Leave-one-out pricing evaluation over a set of historical quotes.

    Examples:
        >>> evaluator = PricingEvaluator(QuoteMatchingEngine())
        >>> report = evaluator.evaluate(quotes)
        >>> print(f"MAPE: {report.mean_absolute_percentage_error:.1%}")
    """

    def __init__(self, engine: QuoteMatchingEngineProtocol):
        self.engine = engine

    def evaluate(
        self,
        quotes: Iterable[QuoteRecord],
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> PricingEvaluationReport:
        """
        Run the evaluation.

        Args:
            quotes: Historical quotes (unpriced ones are ignored)
            min_price: Only evaluate quotes priced at or above this
            max_price: Only evaluate quotes priced at or below this
            min_score: Engine threshold override
            max_matches: Engine result cap override
            progress_callback: Optional callback(current, total)

        Returns:
            PricingEvaluationReport
        """
        priced = [quote for quote in quotes if quote.has_pricing]
        targets = [
            quote
            for quote in priced
            if _in_range(float(quote.preferred_price), min_price, max_price)
        ]
        report = PricingEvaluationReport(min_price=min_price, max_price=max_price)

        logger.info(
            f"Starting pricing evaluation: {len(targets)} target(s), "
            f"{len(priced)} priced candidate(s)"
        )

        for index, quote in enumerate(targets):
            if progress_callback:
                progress_callback(index + 1, len(targets))

            actual = float(quote.preferred_price)
            if actual == 0:
                report.skipped += 1
                continue

            matches = self.engine.find_matches(
                quote, priced, min_score=min_score, max_matches=max_matches
            )
            top = next((match for match in matches if match.has_price_suggestion), None)
            if top is None:
                logger.debug(f"Quote {quote.quote_id}: no priced match")
                report.skipped += 1
                continue

            error = abs(top.suggested_price - actual) / abs(actual)
            report.cases.append(
                PricingCase(
                    quote_id=quote.quote_id,
                    actual_price=actual,
                    suggested_price=top.suggested_price,
                    matched_quote_id=top.matched_quote_id,
                    similarity_score=top.similarity_score,
                    error=error,
                    service_type=quote.service_type,
                )
            )

        logger.info(
            f"Pricing evaluation complete: evaluated={report.evaluated}, "
            f"skipped={report.skipped}, "
            f"MAPE={report.mean_absolute_percentage_error:.2%}"
        )
        return report


def _in_range(price: float, min_price: Optional[float], max_price: Optional[float]) -> bool:
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    return True
