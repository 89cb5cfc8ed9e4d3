"""Error taxonomy for the copycatcher detector core.

Every error is deterministic and derived purely from inputs; nothing in the
core is retryable.
"""
from __future__ import annotations


class DetectorError(Exception):
    """Base class for all detector errors."""


class EmptyInputError(DetectorError, ValueError):
    """A document without tokens, or an empty statistical sample."""


class InvalidParameterError(DetectorError, ValueError):
    """Out-of-range configuration such as a non-positive permutation count."""


class UnknownDocumentError(DetectorError, IndexError):
    """Query against a document id the matrix does not hold (caller bug)."""
