"""Enums for the validation pipeline.

This module contains basic enums to avoid circular dependencies.
"""

from enum import StrEnum


class OutcomeKind(StrEnum):
    """Result of an individual check execution."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"  # Produced by the pipeline only
    SKIPPED = "skipped"  # Produced by the pipeline only


class Disposition(StrEnum):
    """Overall classification of a validation run, for presentation."""

    ACCEPTED = "accepted"  # Every check succeeded
    PARTIAL = "partial"  # Some checks succeeded, some did not
    REJECTED = "rejected"  # No check succeeded
