"""Constants shared by the pipeline, the default checks and the CLI."""

# Consecutive Failure/Timeout outcomes that open the circuit breaker
BREAKER_THRESHOLD = 3

# Messages for outcomes produced by the pipeline itself
MESSAGE_BREAKER_SKIP = "Skipped: circuit breaker is open"
MESSAGE_PRECONDITION_SKIP = "Skipped: preconditions not met"

# Default check names
CHECK_CONTENT_SCHEMA = "content_schema"
CHECK_SIGNING_CREDENTIAL = "signing_credential"
CHECK_TAX_RULES = "tax_rules"
CHECK_DUPLICATE_REGISTRY = "duplicate_registry"
CHECK_EXTERNAL_AUTHORIZATION = "external_authorization"
