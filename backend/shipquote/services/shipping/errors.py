"""
   Shipping engine error types.
   Raised inside the engine and converted by the quote orchestrator into the fallback quote.
"""
from typing import Iterable


class QuoteError(Exception):
    """Base for all quote calculation errors."""


class NotServiceableError(QuoteError):
    """One or both pincodes fail the serviceability check."""

    def __init__(self, pincodes: Iterable[str]):
        self.pincodes = tuple(pincodes)
        super().__init__(f"not serviceable: {', '.join(self.pincodes)}")


class NoZoneResolvedError(QuoteError):
    """Zone lookup could not classify the pickup/delivery pair."""


class ReferenceDataError(QuoteError):
    """Reference data could not be read or was inconsistent."""
