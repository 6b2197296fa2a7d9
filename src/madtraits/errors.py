"""Exceptions raised by MADtraits.

Caller-input errors (unknown providers, bad selections, wrong object shape)
are raised immediately. ``ProviderFailure`` is the one error the collector
recovers from: it is recorded and reported, and the run continues.
"""

from __future__ import annotations

from collections.abc import Iterable


class MADtraitsError(Exception):
    """Base class for all MADtraits errors."""


class UnknownProviderError(MADtraitsError, KeyError):
    """One or more requested dataset identifiers are not registered."""

    def __init__(self, unknown: Iterable[str]) -> None:
        self.unknown = tuple(unknown)
        super().__init__(", ".join(self.unknown))

    def __str__(self) -> str:
        return f"Not in MADtraits: {', '.join(self.unknown)}"


class ProviderFailure(MADtraitsError):
    """A dataset provider raised while downloading or parsing its source."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Could not download from {name}; ignoring ({cause!r})")


class InvalidSelectionError(MADtraitsError, ValueError):
    """Trait selection (or aggregation function) passed to the reshaper is invalid."""


class TypeContractError(MADtraitsError, TypeError):
    """A value does not have the shape an operation requires."""
