"""Process-wide stores shared by validation runs."""

from .identifier_registry import AcceptedIdentifierRegistry, get_identifier_registry

__all__ = [
    "AcceptedIdentifierRegistry",
    "get_identifier_registry",
]
