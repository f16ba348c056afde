"""Document checks and factory functions for the validation pipeline."""

from functools import lru_cache

from doc_validator.pipeline import ValidationPipeline

from .content_schema import ContentSchemaCheck
from .duplicate_registry import DuplicateRegistryCheck
from .external_authorization import ExternalAuthorizationCheck, default_authorizer
from .pipeline_builders import build_document_pipeline, default_checks
from .signing_credential import SigningCredentialCheck
from .tax_rules import TaxRulesCheck


@lru_cache(maxsize=1)
def get_document_pipeline() -> ValidationPipeline:
    """Get the singleton default pipeline instance.

    It uses the process-wide identifier registry and the cached settings, and
    is created once for the lifetime of the process.

    Returns:
        ValidationPipeline: The default document pipeline
    """
    return build_document_pipeline()


__all__ = [
    "ContentSchemaCheck",
    "DuplicateRegistryCheck",
    "ExternalAuthorizationCheck",
    "SigningCredentialCheck",
    "TaxRulesCheck",
    "build_document_pipeline",
    "default_authorizer",
    "default_checks",
    "get_document_pipeline",
]
