"""Reusable pipeline builders for document validation.

This module provides functions that assemble the default check order so it
can be reused by the runner, the CLI and tests.
"""

from doc_validator.pipeline import ValidationCheck, ValidationPipeline, ValidationPipelineBuilder
from doc_validator.settings import Settings, get_settings
from doc_validator.storage import AcceptedIdentifierRegistry, get_identifier_registry

from .content_schema import ContentSchemaCheck
from .duplicate_registry import DuplicateRegistryCheck
from .external_authorization import Authorizer, ExternalAuthorizationCheck
from .signing_credential import SigningCredentialCheck
from .tax_rules import TaxRulesCheck


def default_checks(
    registry: AcceptedIdentifierRegistry,
    settings: Settings,
    authorizer: Authorizer | None = None,
) -> list[ValidationCheck]:
    """Create the default checks in execution order.

    Includes:
    - Content schema check
    - Signing credential check
    - Tax rules check (only if all previous checks passed)
    - Duplicate registry check (rollback-capable)
    - External authorization check (only if all previous checks passed)

    Args:
        registry: Store of accepted identifiers for the duplicate check
        settings: Timeouts and business rule parameters
        authorizer: Optional replacement for the default authorization rule

    Returns:
        Checks in execution order
    """
    latency = settings.simulated_latency_seconds
    return [
        ContentSchemaCheck(timeout_seconds=settings.schema_timeout_seconds, latency_seconds=latency),
        SigningCredentialCheck(timeout_seconds=settings.credential_timeout_seconds, latency_seconds=latency),
        TaxRulesCheck(
            timeout_seconds=settings.tax_timeout_seconds,
            tax_rate=settings.tax_rate,
            tolerance=settings.tax_tolerance,
            latency_seconds=latency,
        ),
        DuplicateRegistryCheck(registry, timeout_seconds=settings.registry_timeout_seconds, latency_seconds=latency),
        ExternalAuthorizationCheck(
            timeout_seconds=settings.authorization_timeout_seconds,
            authorizer=authorizer,
            latency_seconds=latency,
        ),
    ]


def build_document_pipeline(
    registry: AcceptedIdentifierRegistry | None = None,
    settings: Settings | None = None,
    authorizer: Authorizer | None = None,
) -> ValidationPipeline:
    """Build the default document validation pipeline.

    Args:
        registry: Identifier store, defaults to the process-wide registry
        settings: Configuration, defaults to the cached settings
        authorizer: Optional replacement for the default authorization rule

    Returns:
        Configured pipeline ready to run
    """
    checks = default_checks(registry or get_identifier_registry(), settings or get_settings(), authorizer)
    return ValidationPipelineBuilder().add_checks(checks).build()
