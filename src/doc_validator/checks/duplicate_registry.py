"""Duplicate registry check for the validation pipeline.

This is the only default check with an externally visible side effect: it
registers the document identifier in the shared registry and marks the
document as stored. The effect is undone by compensation when a later check
in the same run fails.
"""

from uuid import uuid4

import arrow
from loguru import logger

from doc_validator.constants import CHECK_DUPLICATE_REGISTRY
from doc_validator.document import Document
from doc_validator.exceptions import ValidationFailure
from doc_validator.pipeline import CancellationToken, Outcome, ValidationCheck
from doc_validator.storage import AcceptedIdentifierRegistry


class DuplicateRegistryCheck(ValidationCheck):
    """Rejects already accepted identifiers and registers new ones."""

    supports_rollback = True

    def __init__(
        self,
        registry: AcceptedIdentifierRegistry,
        name: str = CHECK_DUPLICATE_REGISTRY,
        timeout_seconds: float = 4.0,
        latency_seconds: float = 0.0,
    ):
        """Initialize the duplicate registry check.

        Args:
            registry: Store of accepted identifiers, shared across runs
            name: Name of this check
            timeout_seconds: Execution budget
            latency_seconds: Simulated lookup time
        """
        super().__init__(name, timeout_seconds)
        self.registry = registry
        self.latency_seconds = latency_seconds

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        if self.latency_seconds:
            token.wait(self.latency_seconds)

        identifier = document.identifier
        storage_id = f"DB_{identifier}_{int(arrow.utcnow().float_timestamp * 1000)}_{uuid4().hex[:6]}"
        with token.commit():
            if not self.registry.claim(identifier, storage_id):
                # Leaves the token uncommitted: nothing was written
                raise ValidationFailure(
                    "Duplicate document - identifier already registered",
                    {"reason": "duplicate", "identifier": identifier},
                )
            document.stored = True
            document.storage_id = storage_id

        logger.info(f"Document {identifier} registered: {document.storage_id}")
        return self.success(
            f"Document registered (ID: {document.storage_id})",
            {"storage_id": document.storage_id},
        )

    def undo(self, document: Document) -> None:
        """Release the claim recorded on the document by this check.

        Only the claim matching ``document.storage_id`` is released, so an
        identifier accepted by another run stays registered.
        """
        if not document.stored or document.storage_id is None:
            return
        if not self.registry.release(document.identifier, document.storage_id):
            logger.warning(f"Registry holds no claim {document.storage_id} for document {document.identifier}")
            return
        logger.info(f"Removed document {document.identifier} from registry: {document.storage_id}")
        document.stored = False
        document.storage_id = None
