"""
Application Services (Use Cases)

Exports:
    - QuoteMatchingUseCase: batch matching orchestration
    - MatchFeedbackUseCase: feedback on stored matches
"""

from .match_feedback_use_case import MatchFeedbackUseCase
from .quote_matching_use_case import QuoteMatchingUseCase

__all__ = ["QuoteMatchingUseCase", "MatchFeedbackUseCase"]
