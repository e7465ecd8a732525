"""Check registration and discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from profqc.utils.exceptions import UnknownCheckError
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    from profqc.qc.checks import BaseCheck
    from profqc.qc.data_handler import ProfileDataHandler
    from profqc.qc.options import ProfileCheckOptions
    from profqc.qc.profile_indices import ProfileIndices
    from profqc.qc.validator import ProfileCheckValidator

    CheckFactory = Callable[
        [ProfileCheckOptions, ProfileIndices, ProfileDataHandler, "ProfileCheckValidator | None"],
        BaseCheck,
    ]

logger = get_logger("qc.registry")


class CheckRegistry:
    """Registry mapping check keys to check factories.

    Checks are built per profile, so the registry stores constructors
    rather than instances. Registration is expected to happen once at
    startup; afterwards the registry is only read.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._factories: dict[str, CheckFactory] = {}

    def register(self, key: str, factory: CheckFactory) -> None:
        """Register a check factory.

        Args:
            key: Key used in configuration to select the check.
            factory: Callable taking (options, indices, handler, validator).
        """
        if key in self._factories and self._factories[key] is not factory:
            logger.warning(f"Replacing factory registered for check {key}")
        self._factories[key] = factory

    def unregister(self, key: str) -> None:
        """Remove a check from registry.

        Args:
            key: Check key to remove.
        """
        if key in self._factories:
            del self._factories[key]

    def create(
        self,
        key: str,
        options: ProfileCheckOptions,
        profile_indices: ProfileIndices,
        handler: ProfileDataHandler,
        validator: ProfileCheckValidator | None = None,
    ) -> BaseCheck:
        """Instantiate the check registered under ``key``.

        Raises:
            UnknownCheckError: If no factory is registered for ``key``.
        """
        factory = self._factories.get(key)
        if factory is None:
            raise UnknownCheckError(key, self.list_checks())
        return factory(options, profile_indices, handler, validator)

    def list_checks(self) -> list[str]:
        """List all registered check keys."""
        return list(self._factories.keys())

    def __contains__(self, key: str) -> bool:
        """Check if a key is registered."""
        return key in self._factories

    def __len__(self) -> int:
        """Number of registered checks."""
        return len(self._factories)


# Process-wide registry, populated with the built-in checks at import
check_registry = CheckRegistry()


def register_default_checks(registry: CheckRegistry | None = None) -> CheckRegistry:
    """Register built-in profile checks.

    Safe to call more than once.

    Args:
        registry: Registry to populate (defaults to the process-wide one).

    Returns:
        The populated registry.
    """
    from profqc.qc.checks import InterpolationCheck

    registry = check_registry if registry is None else registry
    registry.register("Interpolation", InterpolationCheck)
    return registry


register_default_checks()
