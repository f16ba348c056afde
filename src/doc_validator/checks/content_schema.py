"""Content schema check for the validation pipeline."""

from loguru import logger

from doc_validator.constants import CHECK_CONTENT_SCHEMA
from doc_validator.document import Document
from doc_validator.pipeline import CancellationToken, Outcome, ValidationCheck


class ContentSchemaCheck(ValidationCheck):
    """Validates that the document payload looks like a fiscal document XML."""

    def __init__(
        self,
        name: str = CHECK_CONTENT_SCHEMA,
        timeout_seconds: float = 2.0,
        required_markers: tuple[str, ...] = ("<?xml", "NFe"),
        latency_seconds: float = 0.0,
    ):
        """Initialize the content schema check.

        Args:
            name: Name of this check
            timeout_seconds: Execution budget
            required_markers: Substrings the content must contain
            latency_seconds: Simulated processing time
        """
        super().__init__(name, timeout_seconds)
        self.required_markers = required_markers
        self.latency_seconds = latency_seconds

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        logger.debug(f"Validating content schema of document {document.identifier}")
        if self.latency_seconds:
            token.wait(self.latency_seconds)

        if not document.content or not document.content.strip():
            return self.failed("Content is empty or invalid", {"reason": "empty"})

        missing = [marker for marker in self.required_markers if marker not in document.content]
        if missing:
            return self.failed(
                "Content is not conformant with the document schema",
                {"reason": "schema", "missing_markers": missing},
            )

        return self.success("Content schema validated")
