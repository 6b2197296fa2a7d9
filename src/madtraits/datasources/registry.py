"""Registry of dataset providers, keyed by normalized identifier."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator

from madtraits.datasources.models import DatasetResult
from madtraits.errors import UnknownProviderError

ProviderFunc = Callable[[], DatasetResult]

_SEPARATORS = re.compile(r"[.\-_\s]+")


def normalize_name(name: str) -> str:
    """Normalize a provider identifier: ``".Jones.2009 "`` -> ``"jones.2009"``."""
    name = name.strip().lower()
    name = re.sub(r"\.{2,}", ".", name)
    return name.lstrip(".")


def compact_name(name: str) -> str:
    """Identifier with separators removed: ``"jones.2009"`` -> ``"jones2009"``.

    Used for cache file names, so two providers must never share one.
    """
    return _SEPARATORS.sub("", normalize_name(name))


class ProviderRegistry:
    """Maps provider identifiers to zero-argument provider functions."""

    def __init__(self) -> None:
        self._providers: dict[str, ProviderFunc] = {}

    def register(self, name: str) -> Callable[[ProviderFunc], ProviderFunc]:
        """Decorator registering ``func`` under ``name``.

        Example::

            @registry.register("jones.2009")
            def jones_2009() -> DatasetResult: ...
        """
        key = normalize_name(name)

        def decorator(func: ProviderFunc) -> ProviderFunc:
            if key in self._providers:
                msg = f"Provider already registered: {key}"
                raise ValueError(msg)
            clash = [k for k in self._providers if compact_name(k) == compact_name(key)]
            if clash:
                msg = f"Provider {key} collides with {clash[0]} (same cache file name)"
                raise ValueError(msg)
            self._providers[key] = func
            return func

        return decorator

    def names(self) -> list[str]:
        """Registered identifiers, in registration order."""
        return list(self._providers)

    def resolve(self, name: str) -> ProviderFunc:
        """Return the provider for ``name`` or raise UnknownProviderError."""
        key = normalize_name(name)
        try:
            return self._providers[key]
        except KeyError:
            raise UnknownProviderError([key]) from None

    def select(self, names: Iterable[str] | None = None) -> list[str]:
        """Validate a requested subset; None means every registered provider.

        All unknown identifiers are reported together, before anything runs.
        """
        if names is None:
            return self.names()
        if isinstance(names, str):
            names = [names]

        requested: list[str] = []
        for name in names:
            key = normalize_name(name)
            if key not in requested:
                requested.append(key)

        unknown = [key for key in requested if key not in self._providers]
        if unknown:
            raise UnknownProviderError(unknown)
        return requested

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


#: Default registry - providers in ``madtraits.datasources`` register here on import.
registry = ProviderRegistry()
