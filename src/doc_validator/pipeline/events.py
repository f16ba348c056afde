"""Notifications emitted by a validation run.

Events are Pydantic models delivered synchronously to listeners registered on
the pipeline. A failing listener is logged and isolated from the run and from
the other listeners.

Example:
    def alert(event: BreakerTrippedEvent) -> None:
        metrics.increment("breaker_tripped", tags={"document": event.document_identifier})

    pipeline = ValidationPipeline(checks, listeners=[alert])
"""

from collections.abc import Callable, Iterable
from typing import Any

import arrow
from loguru import logger
from pydantic import BaseModel, Field

ValidationListener = Callable[[BaseModel], Any]


class BreakerTrippedEvent(BaseModel):
    """Emitted once per run when the circuit breaker opens."""

    document_identifier: str
    consecutive_failures: int
    last_check_name: str
    occurred_at: str = Field(default_factory=lambda: arrow.utcnow().isoformat())


class CompensationCompletedEvent(BaseModel):
    """Emitted after a run compensated its registered checks."""

    document_identifier: str
    compensated_checks: list[str]
    errors: list[str] = Field(default_factory=list)
    occurred_at: str = Field(default_factory=lambda: arrow.utcnow().isoformat())


def notify(listeners: Iterable[ValidationListener], event: BaseModel) -> None:
    """Deliver an event to every listener, isolating listener failures."""
    for listener in listeners:
        try:
            listener(event)
        except Exception as e:
            logger.error(f"Listener {listener} failed for {type(event).__name__}: {e}")
