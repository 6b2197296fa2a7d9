"""Run dataset providers through the cache, one at a time.

A failing provider never stops the run: its error is recorded as a
``ProviderFailure``, a warning naming it is printed, and the collector moves
on. Fresh downloads are followed by a politeness delay; cache hits are not.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from madtraits.datasources import registry as default_registry
from madtraits.datasources.models import DatasetResult
from madtraits.errors import ProviderFailure

if TYPE_CHECKING:
    import pandas as pd

    from madtraits.datasources.registry import ProviderFunc, ProviderRegistry
    from madtraits.store import TraitCache


@dataclass
class TaggedResult:
    """A provider's result with every row tagged ``dataset = name``."""

    name: str
    result: DatasetResult

    @property
    def numeric(self) -> pd.DataFrame | None:
        return self.result.numeric

    @property
    def categorical(self) -> pd.DataFrame | None:
        return self.result.categorical


@dataclass
class Collection:
    """Outcome of one collection run, in request order."""

    results: list[TaggedResult] = field(default_factory=list)
    failures: list[ProviderFailure] = field(default_factory=list)
    from_cache: list[str] = field(default_factory=list)
    invoked: list[str] = field(default_factory=list)

    @property
    def failed(self) -> list[str]:
        return [f.name for f in self.failures]


def collect_datasets(
    names: Iterable[str] | None = None,
    *,
    registry: ProviderRegistry | None = None,
    cache: TraitCache | None = None,
    delay: float = 5.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Collection:
    """
    Load every requested dataset from the cache or its provider.

    Args:
        names: Provider identifiers; None means every registered provider.
        registry: Where to resolve names (default: the package registry).
        cache: Optional cache consulted before, and filled after, each download.
        delay: Seconds to wait after each fresh download.
        sleep: Blocking wait function (tests pass a fake).

    Returns:
        Collection of tagged results (failed providers omitted) plus failures.

    Raises:
        UnknownProviderError: Before anything runs, if any name is unknown.
    """
    if registry is None:
        registry = default_registry
    selected = registry.select(names)
    collection = Collection()

    for i, name in enumerate(selected, start=1):
        if cache is not None and name in cache:
            print(f"[{i}/{len(selected)}] {name}: loaded from cache")
            collection.from_cache.append(name)
            result = _load(name, partial(_from_cache, cache, name), collection)
        else:
            print(f"[{i}/{len(selected)}] {name}: downloading")
            collection.invoked.append(name)
            provider = registry.resolve(name)
            result = _load(name, partial(_from_provider, provider), collection)
            if result is not None and cache is not None:
                cache.put(name, result)
            sleep(delay)

        if result is not None:
            collection.results.append(TaggedResult(name, result.tagged(name)))

    return collection


def _from_provider(provider: ProviderFunc) -> DatasetResult:
    result = provider()
    if not isinstance(result, DatasetResult):
        msg = f"provider returned {type(result).__name__}, not DatasetResult"
        raise TypeError(msg)
    return result.validate()


def _from_cache(cache: TraitCache, name: str) -> DatasetResult:
    result = cache.get(name)
    if result is None:
        msg = f"cache entry for {name} disappeared"
        raise FileNotFoundError(msg)
    return result.validate()


def _load(
    name: str, load: Callable[[], DatasetResult], collection: Collection
) -> DatasetResult | None:
    """Run ``load``; on any error record it against ``name``, warn, and return None.

    The returned result is already cast to canonical dtypes, so tagging and
    caching it cannot fail later in the run.
    """
    try:
        return load()
    except Exception as exc:  # noqa: BLE001
        failure = ProviderFailure(name, exc)
        collection.failures.append(failure)
        print(f"Warning: {failure}", file=sys.stderr)
        return None
