"""Entry point for validating documents.

The ValidationRunner builds a pipeline once from a configured list of checks
and exposes a single ``run`` operation. Callers inspect the returned RunState
to decide what to do with the document; there is no pass/fail return value.

Typical Usage:
    runner = ValidationRunner()
    state = runner.run(document)
    if state.failure_count:
        ...
"""

from collections.abc import Iterable, Sequence

from loguru import logger

from doc_validator.checks import default_checks
from doc_validator.document import Document
from doc_validator.pipeline import RunState, ValidationCheck, ValidationPipeline, ValidationRunReport
from doc_validator.pipeline.events import ValidationListener
from doc_validator.settings import Settings, get_settings
from doc_validator.storage import AcceptedIdentifierRegistry, get_identifier_registry


class ValidationRunner:
    """Builds a validation pipeline and runs documents through it.

    Attributes:
        pipeline: The pipeline built at construction time
        registry: Identifier store used by the default checks
    """

    def __init__(
        self,
        checks: Sequence[ValidationCheck] | None = None,
        registry: AcceptedIdentifierRegistry | None = None,
        settings: Settings | None = None,
        listeners: Iterable[ValidationListener] = (),
    ):
        """Initialize the runner.

        Args:
            checks: Checks in execution order; defaults to the document checks
                built from ``settings`` and ``registry``
            registry: Identifier store for the default checks, defaults to the
                process-wide registry
            settings: Configuration for the default checks
            listeners: Callables notified of breaker and compensation events
        """
        self.registry = registry or get_identifier_registry()
        if checks is None:
            checks = default_checks(self.registry, settings or get_settings())
        self.pipeline = ValidationPipeline(checks, listeners)
        logger.debug(f"Runner initialized with {self.pipeline!r}")

    def run(self, document: Document) -> RunState:
        """Validate a document.

        Returns:
            RunState: Ledger of the run
        """
        return self.pipeline.run(document)

    def report(self, document: Document) -> ValidationRunReport:
        """Validate a document and return a serializable summary."""
        return self.pipeline.report(document)
