"""Data models for the validation pipeline.

This module contains Pydantic models used throughout the validation pipeline
to avoid circular dependencies between components.
"""

from typing import Any

import arrow
from pydantic import BaseModel, Field

from .enums import Disposition, OutcomeKind


class Outcome(BaseModel):
    """Immutable result of one check execution."""

    model_config = {"frozen": True}

    check_name: str
    kind: OutcomeKind
    message: str
    execution_time_ms: float = Field(default=0.0, ge=0)
    requires_compensation: bool = False
    details: dict[str, Any] = Field(default_factory=dict)
    executed_at: str = Field(default_factory=lambda: arrow.utcnow().isoformat())  # ISO 8601 UTC timestamp

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def is_failure(self) -> bool:
        """True for Failure and Timeout, the kinds counted by the breaker."""
        return self.kind in (OutcomeKind.FAILURE, OutcomeKind.TIMEOUT)

    def __str__(self) -> str:
        return f"[{self.kind.upper()}] {self.check_name} - {self.message} ({self.execution_time_ms:.0f}ms)"


class ValidationRunReport(BaseModel):
    """Serializable snapshot of a finished validation run."""

    model_config = {"use_enum_values": True}

    document_identifier: str
    disposition: Disposition
    message: str
    outcomes: list[Outcome] = Field(default_factory=list)
    total_checks: int = 0
    successful_checks: int = 0
    failed_checks: int = 0
    timed_out_checks: int = 0
    skipped_checks: int = 0
    breaker_tripped: bool = False
    rollback_performed: bool = False
    compensated_checks: list[str] = Field(default_factory=list)
    compensation_errors: list[str] = Field(default_factory=list)
    total_execution_time_ms: float | None = None
    executed_at: str = Field(default_factory=lambda: arrow.utcnow().isoformat())
