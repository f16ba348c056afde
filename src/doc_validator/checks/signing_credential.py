"""Signing credential check for the validation pipeline."""

from doc_validator.constants import CHECK_SIGNING_CREDENTIAL
from doc_validator.document import Document
from doc_validator.pipeline import CancellationToken, Outcome, ValidationCheck


class SigningCredentialCheck(ValidationCheck):
    """Validates presence, expiry and revocation of the signing credential."""

    def __init__(
        self,
        name: str = CHECK_SIGNING_CREDENTIAL,
        timeout_seconds: float = 3.0,
        latency_seconds: float = 0.0,
    ):
        super().__init__(name, timeout_seconds)
        self.latency_seconds = latency_seconds

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        if self.latency_seconds:
            token.wait(self.latency_seconds)

        credential = document.signing_credential
        if not credential:
            return self.failed("Signing credential not found", {"reason": "missing"})

        if "EXPIRED" in credential:
            return self.failed("Signing credential expired", {"reason": "expired"})

        if "REVOKED" in credential:
            return self.failed("Signing credential revoked", {"reason": "revoked"})

        return self.success("Signing credential valid (expiry and revocation OK)")
