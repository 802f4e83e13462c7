"""
Registry of supported database backends.

Maps backend names and their aliases to introspector classes.
"""

from typing import Dict, List, Optional, Type

from .base import IntrospectionError, Introspector
from .reflection import MySQLIntrospector, PostgreSQLIntrospector, SQLiteIntrospector


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class IntrospectorRegistry:
    """Registry for managing available backend introspectors."""

    def __init__(self):
        """Initialize empty registry."""
        self._introspectors: Dict[str, Type[Introspector]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        backend: str,
        introspector_class: Type[Introspector],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register an introspector for a backend.

        Args:
            backend: Primary backend name (e.g., 'mysql', 'sqlite3')
            introspector_class: Class implementing Introspector
            aliases: Alternative names for this backend
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If the class is invalid or an alias conflicts
        """
        if not issubclass(introspector_class, Introspector):
            raise RegistryError("Introspector class must inherit from Introspector")

        backend_key = backend.lower()

        if backend_key in self._introspectors and not replace:
            return

        self._introspectors[backend_key] = introspector_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == backend_key:
                continue

            if not replace:
                if alias_key in self._introspectors:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary backend"
                    )
                if self._aliases.get(alias_key, backend_key) != backend_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = backend_key

    def unregister(self, backend: str):
        """Unregister a backend and its aliases."""
        backend_key = backend.lower()
        self._introspectors.pop(backend_key, None)
        for alias in [a for a, target in self._aliases.items() if target == backend_key]:
            del self._aliases[alias]

    def resolve(self, backend: str) -> str:
        """Return the primary name for a backend name or alias."""
        backend_key = backend.lower()
        if backend_key in self._introspectors:
            return backend_key
        if backend_key in self._aliases:
            return self._aliases[backend_key]

        raise RegistryError(
            f"Unsupported database: {backend}. "
            f"Available: {', '.join(self.list_backends())}"
        )

    def get_introspector_class(self, backend: str) -> Type[Introspector]:
        return self._introspectors[self.resolve(backend)]

    def create_introspector(self, backend: str, dsn: str) -> Introspector:
        """
        Create an introspector instance for a backend.

        Raises:
            IntrospectionError: If the backend is unknown or the DSN is empty
        """
        try:
            introspector_class = self.get_introspector_class(backend)
        except RegistryError as e:
            raise IntrospectionError(str(e)) from e
        return introspector_class(dsn)

    def list_backends(self) -> List[str]:
        """Get list of registered primary backend names."""
        return sorted(self._introspectors.keys())

    def get_aliases(self, backend: str) -> List[str]:
        backend_key = backend.lower()
        return sorted(a for a, target in self._aliases.items() if target == backend_key)

    def is_supported(self, backend: str) -> bool:
        backend_key = backend.lower()
        return backend_key in self._introspectors or backend_key in self._aliases


_global_registry: Optional[IntrospectorRegistry] = None


def get_registry() -> IntrospectorRegistry:
    """Get the global introspector registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = IntrospectorRegistry()
        _global_registry.register("mysql", MySQLIntrospector)
        _global_registry.register(
            "postgresql", PostgreSQLIntrospector, aliases=["postgres"]
        )
        _global_registry.register("sqlite3", SQLiteIntrospector, aliases=["sqlite"])
    return _global_registry


def get_introspector(backend: str, dsn: str) -> Introspector:
    """Get an introspector instance from the global registry."""
    return get_registry().create_introspector(backend, dsn)


def list_supported_backends() -> List[str]:
    """List all supported backends from the global registry."""
    return get_registry().list_backends()
