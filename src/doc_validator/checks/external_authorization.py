"""External authorization check for the validation pipeline.

Runs only when every earlier check in the run succeeded. The decision is
delegated to a pluggable authorizer so a real service client can replace the
default rule.
"""

from collections.abc import Callable

from doc_validator.constants import CHECK_EXTERNAL_AUTHORIZATION
from doc_validator.document import Document
from doc_validator.pipeline import CancellationToken, Outcome, RunState, ValidationCheck

Authorizer = Callable[[Document], bool]


def default_authorizer(document: Document) -> bool:
    """Offline stand-in for the tax authority: rejects identifiers ending in 999."""
    return not document.identifier.endswith("999")


class ExternalAuthorizationCheck(ValidationCheck):
    """Asks the external authority to authorize the document."""

    def __init__(
        self,
        name: str = CHECK_EXTERNAL_AUTHORIZATION,
        timeout_seconds: float = 10.0,
        authorizer: Authorizer | None = None,
        latency_seconds: float = 0.0,
    ):
        super().__init__(name, timeout_seconds)
        self.authorizer = authorizer or default_authorizer
        self.latency_seconds = latency_seconds

    def should_run(self, state: RunState) -> bool:
        return state.all_succeeded_so_far()

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        if self.latency_seconds:
            token.wait(self.latency_seconds)

        authorized = self.authorizer(document)
        token.raise_if_cancelled()

        if not authorized:
            return self.failed("Authorization rejected - inconsistent document data", {"authorized": False})

        return self.success("Document authorized", {"authorized": True})
