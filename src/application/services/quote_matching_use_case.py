"""
Quote Matching Use Case - Application Orchestration

Responsibility:
    Orchestrates batch matching of newly parsed quotes against the historical
    quote store. Implements Use Case pattern from Clean Architecture.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on Domain Layer via Protocols (repositories, matching engine)
    - Infrastructure injected through the constructor
    - No direct HTTP handling (that's API Layer concern)

Contains:
    - QuoteMatchingUseCase: batch run, rematch and read of stored matches

Does NOT contain:
    - Scoring or price rules (QuoteMatchingEngine in Domain Layer)
    - Redis access (repositories in Infrastructure Layer)
"""

import logging
from typing import Optional

from src.application.commands.run_quote_matching import RunQuoteMatchingCommand
from src.application.models import MatchingError, MatchingRunSummary
from src.domain.quoting.repositories import (
    QuoteMatchRepositoryProtocol,
    QuoteRepositoryProtocol,
)
from src.domain.quoting.services import (
    QuoteMatchingEngine,
    QuoteMatchingEngineProtocol,
)
from src.domain.quoting.value_objects import QuoteMatch
from src.domain.shared.exceptions import QuoteNotFoundError

# Configure logger for this module
logger = logging.getLogger(__name__)


class QuoteMatchingUseCase:
    """
    Orchestrates historical quote matching.

    Flow of process_new_quotes():
        1. Load the historical pool once (new ids excluded, priced only, capped)
        2. Return early if the pool is empty
        3. For every quote id:
            a. Load the query quote (missing -> logged and skipped)
            b. Run the matching engine against the pool
            c. Persist matches (if any)
        4. Return MatchingRunSummary

    Error Handling:
        - Failure to load the pool propagates (nothing can be matched)
        - A failure for one quote is logged, recorded in the summary and the
          run continues with the next quote

    Dependencies:
        - quote_repository: QuoteRepositoryProtocol
        - match_repository: QuoteMatchRepositoryProtocol
        - engine: QuoteMatchingEngineProtocol (optional; by default a
          QuoteMatchingEngine is built per run from the command options)

    Example:
        >>> use_case = QuoteMatchingUseCase(RedisQuoteRepository(),
        ...                                 RedisQuoteMatchRepository())
        >>> summary = await use_case.process_new_quotes(
        ...     RunQuoteMatchingCommand(quote_ids=[10726, 10727])
        ... )
        >>> summary.matches_created
        7
    """

    def __init__(
        self,
        quote_repository: QuoteRepositoryProtocol,
        match_repository: QuoteMatchRepositoryProtocol,
        engine: Optional[QuoteMatchingEngineProtocol] = None,
    ):
        self.quote_repository = quote_repository
        self.match_repository = match_repository
        self.engine = engine

    async def process_new_quotes(
        self, command: RunQuoteMatchingCommand
    ) -> MatchingRunSummary:
        """
        Match every quote of the command against the historical pool.

        Args:
            command: Quote ids and matching options

        Returns:
            MatchingRunSummary with counts, per-quote errors and best scores

        Raises:
            PersistenceError: If the historical pool cannot be loaded
        """
        summary = MatchingRunSummary()
        engine = self._resolve_engine(command)

        logger.info(
            f"Starting quote matching for {len(command.quote_ids)} quote(s) "
            f"(min_score={command.min_score}, max_matches={command.max_matches})"
        )

        historical = await self.quote_repository.get_historical_quotes_for_matching(
            exclude_ids=command.quote_ids,
            limit=command.candidate_limit,
            only_with_price=True,
        )
        logger.info(f"Loaded {len(historical)} historical quotes for matching")

        if not historical:
            logger.warning("No historical quotes available, nothing to match against")
            return summary

        for quote_id in command.quote_ids:
            try:
                query = await self.quote_repository.get_quote_for_matching(quote_id)
                if query is None:
                    logger.warning(f"Quote {quote_id} not found, skipping")
                    continue

                matches = engine.find_matches(
                    query,
                    historical,
                    min_score=command.min_score,
                    max_matches=command.max_matches,
                )

                if matches:
                    summary.matches_created += await self.match_repository.save_matches(
                        matches
                    )

                summary.processed += 1
                summary.results[quote_id] = (
                    matches[0].similarity_score if matches else None
                )
                logger.info(
                    f"Quote {quote_id}: {len(matches)} match(es) found"
                    + (f", best score {matches[0].similarity_score}" if matches else "")
                )

            except Exception as e:
                logger.error(f"Error matching quote {quote_id}: {e}", exc_info=True)
                summary.errors.append(MatchingError(quote_id=quote_id, error=str(e)))

        logger.info(
            f"Quote matching finished: processed={summary.processed}, "
            f"matches_created={summary.matches_created}, errors={summary.failed}"
        )
        return summary

    async def rematch_quote(
        self,
        quote_id: int,
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
    ) -> MatchingRunSummary:
        """
        Recompute matches for one quote, replacing the stored ones.

        Raises:
            QuoteNotFoundError: If the quote does not exist
        """
        if await self.quote_repository.get_quote_for_matching(quote_id) is None:
            raise QuoteNotFoundError(quote_id)

        deleted = await self.match_repository.delete_matches_for_quote(quote_id)
        logger.info(f"Deleted {deleted} existing match(es) for quote {quote_id}")

        options: dict = {"quote_ids": [quote_id]}
        if min_score is not None:
            options["min_score"] = min_score
        if max_matches is not None:
            options["max_matches"] = max_matches
        return await self.process_new_quotes(RunQuoteMatchingCommand(**options))

    async def get_matches(
        self, quote_id: int, limit: int = 10, min_score: float = 0.0
    ) -> list[QuoteMatch]:
        """Stored matches of a quote, best first."""
        return await self.match_repository.get_matches_for_quote(
            quote_id, limit=limit, min_score=min_score
        )

    def _resolve_engine(
        self, command: RunQuoteMatchingCommand
    ) -> QuoteMatchingEngineProtocol:
        if self.engine is not None:
            return self.engine
        return QuoteMatchingEngine(config=command.to_matching_config())
