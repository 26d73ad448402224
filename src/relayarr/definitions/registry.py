"""Definition registry and global instance management for relayarr."""

from collections.abc import Iterable, Iterator
from pathlib import Path

import anyio

from .. import logger
from .loader import load_definitions
from .matcher import match_any
from .models import MatchResult, ValidDefinition


class DefinitionRegistry:
    """Validated definitions indexed by identifier, in load order."""

    def __init__(self, definitions: Iterable[ValidDefinition] = ()) -> None:
        self._definitions: dict[str, ValidDefinition] = {}
        for valid in definitions:
            self.add(valid)

    def add(self, valid: ValidDefinition) -> None:
        """Register a definition.

        Raises:
            ValueError: If a definition with the same identifier exists.
        """
        if valid.identifier in self._definitions:
            raise ValueError(f"Duplicate definition identifier: {valid.identifier}")
        self._definitions[valid.identifier] = valid

    def get(self, identifier: str) -> ValidDefinition | None:
        return self._definitions.get(identifier)

    def __getitem__(self, identifier: str) -> ValidDefinition:
        return self._definitions[identifier]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._definitions

    def __iter__(self) -> Iterator[ValidDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def identifiers(self) -> list[str]:
        return list(self._definitions)

    def find_match(
        self, line: str, identifiers: Iterable[str] | None = None
    ) -> tuple[ValidDefinition, MatchResult] | None:
        """Match a line against registered definitions.

        Args:
            line: Raw announce line.
            identifiers: Restrict matching to these definitions, tried in the
                given order. Unknown identifiers are skipped.

        Returns:
            The first matching definition and its result, or None.
        """
        if identifiers is None:
            candidates: Iterable[ValidDefinition] = self
        else:
            candidates = [
                self._definitions[i] for i in identifiers if i in self._definitions
            ]
        return match_any(candidates, line)


# Global registry instance
_registry_instance: DefinitionRegistry | None = None
_registry_lock = anyio.Lock()


async def init_definitions(
    directories: Iterable[str | Path], strict: bool = False
) -> None:
    """Initialize the global definition registry.

    Should be called once during application startup. Any invalid definition
    aborts initialization.

    Args:
        directories: Directories to load, in priority order.
        strict: Treat failing pattern examples as errors.

    Raises:
        RuntimeError: If already initialized.
        DefinitionError: If a definition is invalid.
    """
    global _registry_instance
    async with _registry_lock:
        if _registry_instance is not None:
            raise RuntimeError("Definitions already initialized.")

        logger.section("===== Loading Definitions =====")
        registry = DefinitionRegistry()
        for directory in directories:
            for valid in load_definitions(directory, strict=strict):
                registry.add(valid)
                logger.debug("Loaded definition %s", valid.identifier)

        logger.success("Loaded %d definition(s)", len(registry))
        _registry_instance = registry


def get_definitions() -> DefinitionRegistry:
    """Get the global definition registry.

    Must be called after init_definitions() has been invoked.

    Raises:
        RuntimeError: If the registry has not been initialized.
    """
    if _registry_instance is None:
        raise RuntimeError("Definitions not initialized. Call init_definitions() first.")
    return _registry_instance
