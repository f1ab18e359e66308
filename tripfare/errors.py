"""Exceptions raised by the I/O edges of tripfare (policy files, offer files).

The reconciliation and baggage lookups themselves never raise.
"""


class TripfareError(Exception):
    """Base class for all tripfare errors."""


class PolicyFileError(TripfareError):
    """Baggage policy file is unreadable or does not describe valid allowances."""


class OfferFileError(TripfareError):
    """Offers file is unreadable or one of its records is malformed."""
