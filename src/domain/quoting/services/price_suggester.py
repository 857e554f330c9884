"""
Price Suggester

Derives a suggested price and a confidence figure from one matched
historical quote.

Business Rules:
    - Price source: final_agreed_price if present, else initial_quote_amount
    - No price on the candidate -> no suggestion (price None, confidence 0)
    - Confidence = min(1, similarity + 0.1) for accepted (final) prices,
      similarity alone for initial quotes
    - Confidence rounded to 4 decimal places
"""

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.matching_config import (
    FINAL_PRICE_CONFIDENCE_BONUS,
    round_score,
)
from src.domain.quoting.value_objects.price_suggestion import PriceSuggestion


def suggest_price(candidate: QuoteRecord, similarity_score: float) -> PriceSuggestion:
    """
    Suggest a price from a historical quote.

    Args:
        candidate: Historical quote that matched
        similarity_score: Overall similarity already computed for it (0-1)

    Returns:
        PriceSuggestion; PriceSuggestion.none() when the candidate has no price

    Examples:
        >>> record = QuoteRecord(quote_id=7, final_agreed_price=900,
        ...                      initial_quote_amount=1200)
        >>> suggestion = suggest_price(record, 0.8)
        >>> suggestion.suggested_price
        900.0
        >>> suggestion.price_confidence
        0.9
    """
    price = candidate.preferred_price
    if price is None:
        return PriceSuggestion.none()

    from_final_price = candidate.final_agreed_price is not None
    bonus = FINAL_PRICE_CONFIDENCE_BONUS if from_final_price else 0.0
    confidence = min(1.0, max(0.0, similarity_score) + bonus)

    return PriceSuggestion(
        suggested_price=float(price),
        price_confidence=round_score(confidence),
        from_final_price=from_final_price,
    )
