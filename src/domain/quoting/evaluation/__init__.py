"""
Pricing Evaluation Module

Leave-one-out measurement of suggested-price accuracy.

Exports:
    - PricingEvaluator
    - PricingEvaluationReport
    - PricingCase
"""

from .pricing_evaluation import PricingCase, PricingEvaluationReport, PricingEvaluator

__all__ = ["PricingEvaluator", "PricingEvaluationReport", "PricingCase"]
