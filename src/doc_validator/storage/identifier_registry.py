"""Registry of accepted document identifiers.

The registry outlives individual runs and is shared by every pipeline that
receives it, including pipelines running concurrently in different threads.
All operations take the same lock, so ``claim`` is an atomic check-and-insert:
two runs claiming the same identifier at the same time cannot both succeed.

Example:
    registry = get_identifier_registry()
    if registry.claim("NFE00001"):
        ...  # first acceptance
    registry.release("NFE00001")  # compensation
"""

import threading
from collections.abc import Iterator
from functools import lru_cache

from loguru import logger


class AcceptedIdentifierRegistry:
    """Thread-safe set of accepted document identifiers."""

    def __init__(self):
        # identifier -> claim id of the run that accepted it
        self._identifiers: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def claim(self, identifier: str, claim_id: str | None = None) -> bool:
        """Insert an identifier unless it is already registered.

        Args:
            identifier: The document identifier to accept
            claim_id: Marker of the accepting run, checked again by ``release``

        Returns:
            True if the identifier was inserted, False if it was a duplicate
        """
        with self._lock:
            if identifier in self._identifiers:
                logger.debug(f"Identifier {identifier} already registered")
                return False
            self._identifiers[identifier] = claim_id
        logger.debug(f"Identifier {identifier} registered")
        return True

    def release(self, identifier: str, claim_id: str | None = None) -> bool:
        """Remove an identifier.

        Args:
            identifier: The document identifier to remove
            claim_id: When given, only the claim made with this marker is removed

        Returns:
            True if the identifier was removed, False otherwise
        """
        with self._lock:
            if identifier not in self._identifiers:
                return False
            if claim_id is not None and self._identifiers[identifier] != claim_id:
                logger.debug(f"Identifier {identifier} is held by another claim, not released")
                return False
            del self._identifiers[identifier]
        logger.debug(f"Identifier {identifier} released")
        return True

    def contains(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._identifiers

    def clear(self) -> None:
        """Remove every identifier."""
        with self._lock:
            self._identifiers.clear()

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._identifiers)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.contains(identifier)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._identifiers)


@lru_cache(maxsize=1)
def get_identifier_registry() -> AcceptedIdentifierRegistry:
    """Get the process-wide identifier registry.

    Returns:
        The registry shared by the default pipeline and runner
    """
    return AcceptedIdentifierRegistry()
