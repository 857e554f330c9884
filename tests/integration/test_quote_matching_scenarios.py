"""
Integration tests for the quote matching pipeline.

These tests use REAL components (not mocks):
- Real QuoteExportReader reading a CSV export from disk
- Real QuoteMatchingEngine with the default configuration
- Real QuoteMatchingUseCase and MatchFeedbackUseCase over in-memory repositories
- Real PricingEvaluator

Purpose: Verify that export -> matching -> stored matches -> evaluation work
together on a small realistic data set.
"""

import pytest

from src.application.commands.run_quote_matching import RunQuoteMatchingCommand
from src.application.commands.submit_match_feedback import SubmitMatchFeedbackCommand
from src.application.services.match_feedback_use_case import MatchFeedbackUseCase
from src.application.services.quote_matching_use_case import QuoteMatchingUseCase
from src.domain.quoting.evaluation import PricingEvaluator
from src.domain.quoting.services.quote_matching_engine import QuoteMatchingEngine
from src.domain.quoting.value_objects import FeedbackStatistics
from src.domain.shared.exceptions import MatchNotFoundError
from src.infrastructure.file_storage.quote_export_reader import QuoteExportReader

pytestmark = pytest.mark.integration


EXPORT_ROWS = [
    "quote_id,origin_city,origin_state_province,origin_country,destination_city,"
    "destination_state_province,destination_country,cargo_description,cargo_weight,"
    "weight_unit,number_of_pieces,hazardous_material,service_type,"
    "initial_quote_amount,final_agreed_price",
    "1,Savannah,GA,USA,Chicago,IL,USA,,65000,lbs,,,Drayage,,",
    "2,Savannah,GA,USA,Chicago,IL,USA,,64000,lbs,,,Drayage,2400,2200",
    "3,Seattle,WA,USA,Miami,FL,USA,,5000,kg,,,Ocean,,4100",
    "4,Savannah,GA,USA,Atlanta,GA,USA,steel coils,20000,kg,2,false,Drayage,1500,",
    "5,Savannah,GA,USA,Atlanta,GA,USA,steel coils,21000,kg,2,false,Drayage,,1450",
    "6,Houston,TX,USA,Dallas,TX,USA,,,,,,Ground,,",
]


# ============================================================================
# IN-MEMORY REPOSITORIES
# ============================================================================


class InMemoryQuoteRepository:
    def __init__(self, quotes):
        self.quotes = {quote.quote_id: quote for quote in quotes}

    async def save(self, quote):
        self.quotes[quote.quote_id] = quote

    async def save_many(self, quotes):
        quotes = list(quotes)
        for quote in quotes:
            self.quotes[quote.quote_id] = quote
        return len(quotes)

    async def get_quote_for_matching(self, quote_id):
        return self.quotes.get(quote_id)

    async def get_historical_quotes_for_matching(
        self, exclude_ids, limit=500, only_with_price=True
    ):
        excluded = set(exclude_ids)
        pool = [
            quote
            for quote_id, quote in sorted(self.quotes.items(), reverse=True)
            if quote_id not in excluded and (quote.has_pricing or not only_with_price)
        ]
        return pool[:limit]


class InMemoryQuoteMatchRepository:
    def __init__(self):
        self.matches = {}
        self.feedback = {}

    async def save_matches(self, matches):
        matches = list(matches)
        for match in matches:
            self.matches.setdefault(match.source_quote_id, {})[match.matched_quote_id] = match
        return len(matches)

    async def get_matches_for_quote(self, quote_id, limit=10, min_score=0.0):
        stored = [
            match
            for match in self.matches.get(quote_id, {}).values()
            if match.similarity_score >= min_score
        ]
        stored.sort(key=lambda match: (-match.similarity_score, match.matched_quote_id))
        return stored[:limit]

    async def delete_matches_for_quote(self, quote_id):
        return len(self.matches.pop(quote_id, {}))

    async def get_match(self, source_quote_id, matched_quote_id):
        return self.matches.get(source_quote_id, {}).get(matched_quote_id)

    async def save_feedback(self, feedback):
        key = (feedback.source_quote_id, feedback.matched_quote_id, feedback.user_id)
        self.feedback[key] = feedback

    async def get_feedback_for_match(self, source_quote_id, matched_quote_id):
        entries = [
            entry
            for (source, matched, _), entry in self.feedback.items()
            if (source, matched) == (source_quote_id, matched_quote_id)
        ]
        return sorted(entries, key=lambda entry: entry.created_at, reverse=True)

    async def get_feedback_statistics(self, algorithm_version=None):
        rated = [
            (entry, self.matches[source][matched])
            for (source, matched, _), entry in self.feedback.items()
            if matched in self.matches.get(source, {})
        ]
        return FeedbackStatistics.from_feedback(rated, algorithm_version=algorithm_version)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def export_quotes(tmp_path):
    export = tmp_path / "shipping_quotes.csv"
    export.write_text("\n".join(EXPORT_ROWS) + "\n", encoding="utf-8")
    return QuoteExportReader().read(export)


@pytest.fixture
def match_repository():
    return InMemoryQuoteMatchRepository()


@pytest.fixture
def use_case(export_quotes, match_repository):
    return QuoteMatchingUseCase(
        quote_repository=InMemoryQuoteRepository(export_quotes),
        match_repository=match_repository,
    )


# ============================================================================
# TESTS
# ============================================================================


def test_export_loads_every_row(export_quotes):
    """Test that every valid export row is loaded."""
    assert [quote.quote_id for quote in export_quotes] == [1, 2, 3, 4, 5, 6]
    assert export_quotes[3].hazardous_material is False
    assert export_quotes[5].cargo_weight is None


def test_savannah_drayage_scenario(export_quotes):
    """Test the Savannah drayage scenario on exported data."""
    query, pool = export_quotes[0], export_quotes[1:]

    matches = QuoteMatchingEngine().find_matches(query, pool, min_score=0.5)

    assert matches[0].matched_quote_id == 2
    assert matches[0].suggested_price == 2200.0
    assert matches[0].similarity_score == 0.6923
    assert 3 not in [match.matched_quote_id for match in matches]


@pytest.mark.asyncio
async def test_batch_run_stores_matches(use_case):
    """Test that a batch run stores ranked matches."""
    summary = await use_case.process_new_quotes(RunQuoteMatchingCommand(quote_ids=[1, 4, 6]))

    assert summary.processed == 3
    assert summary.failed == 0
    assert summary.results[1] == 0.6923
    assert summary.results[4] is not None

    stored = await use_case.get_matches(4)
    assert stored[0].matched_quote_id == 5
    assert stored[0].suggested_price == 1450.0


@pytest.mark.asyncio
async def test_rematch_replaces_previous_results(use_case):
    """Test that rematching replaces stored matches."""
    await use_case.process_new_quotes(RunQuoteMatchingCommand(quote_ids=[1], min_score=0.0))
    assert len(await use_case.get_matches(1)) > 1

    await use_case.rematch_quote(1, min_score=0.6)

    stored = await use_case.get_matches(1)
    assert [match.matched_quote_id for match in stored] == [2]


@pytest.mark.asyncio
async def test_feedback_on_stored_matches(use_case, match_repository):
    """Test feedback replacement and statistics on matches from a real run."""
    await use_case.process_new_quotes(RunQuoteMatchingCommand(quote_ids=[1]))
    feedback_use_case = MatchFeedbackUseCase(match_repository=match_repository)

    await feedback_use_case.submit_feedback(
        1, 2, SubmitMatchFeedbackCommand(rating=-1, feedback_reason="price_outdated", user_id="u1")
    )
    await feedback_use_case.submit_feedback(
        1, 2, SubmitMatchFeedbackCommand(rating=1, actual_price_used=2300, user_id="u1")
    )
    with pytest.raises(MatchNotFoundError):
        await feedback_use_case.submit_feedback(1, 3, SubmitMatchFeedbackCommand(rating=1))

    entries = await feedback_use_case.get_feedback(1, 2)
    assert [entry.rating for entry in entries] == [1]

    stats = await feedback_use_case.get_statistics()
    assert stats.total_feedback == 1
    assert stats.approval_rate == 1.0
    assert stats.avg_price_error == 100.0
    assert (await feedback_use_case.get_statistics(algorithm_version="v2")).total_feedback == 0


def test_pricing_evaluation_over_export(export_quotes):
    """Test pricing evaluation over the exported quotes."""
    report = PricingEvaluator(QuoteMatchingEngine()).evaluate(export_quotes)

    assert report.evaluated + report.skipped == sum(q.has_pricing for q in export_quotes)
    case_by_id = {case.quote_id: case for case in report.cases}
    assert case_by_id[5].matched_quote_id == 4
    assert case_by_id[5].suggested_price == 1500.0
    assert "# Pricing Evaluation Report" in report.to_markdown()
