"""Document validation pipeline module.

This module provides a sequential validation pipeline:
- Checks run one at a time, in declaration order, each under its own timeout
- A circuit breaker skips remaining checks after repeated failures
- Checks can be made conditional on the outcomes of earlier ones
- Side effects of successful checks are compensated when a later check fails

The pipeline runtime is decoupled from specific check implementations.
Check implementations and pipeline configuration are in the checks submodule.
"""

from .base import ValidationCheck
from .builder import ValidationPipelineBuilder
from .cancellation import CancellationToken
from .enums import Disposition, OutcomeKind
from .events import BreakerTrippedEvent, CompensationCompletedEvent
from .function_check import FunctionCheck
from .models import Outcome, ValidationRunReport
from .pipeline import ValidationPipeline
from .state import RunState

# Public API - Only infrastructure components, no specific check implementations
__all__ = [
    # Core models
    "Disposition",
    "Outcome",
    "OutcomeKind",
    "ValidationRunReport",
    "RunState",
    "ValidationCheck",
    "CancellationToken",
    "FunctionCheck",
    # Events
    "BreakerTrippedEvent",
    "CompensationCompletedEvent",
    # Pipeline components
    "ValidationPipeline",
    "ValidationPipelineBuilder",
]
