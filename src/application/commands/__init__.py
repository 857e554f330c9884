"""Application Commands (CQRS write side)."""

from .run_quote_matching import RunQuoteMatchingCommand
from .submit_match_feedback import SubmitMatchFeedbackCommand

__all__ = ["RunQuoteMatchingCommand", "SubmitMatchFeedbackCommand"]
