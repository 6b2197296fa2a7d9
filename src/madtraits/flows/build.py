"""
Prefect flow that builds a TraitDatabase from every dataset provider.

Run locally (all datasets, cached under ./cache):
    python -m madtraits.flows.build

Usage from Python::

    from madtraits.flows.build import build_database

    db = build_database(cache_dir="~/madtraits-cache")
    oaks = db.filter(species=["quercus_robur", "quercus_ilex"])

Please use a cache. Downloads are slow, and every fresh download is followed
by a pause (``delay`` seconds) so publisher servers aren't hammered. With a
cache, that cost is paid once.
"""

from __future__ import annotations

from pathlib import Path

from prefect import flow

from madtraits.aggregate import aggregate
from madtraits.collect import collect_datasets
from madtraits.database import TraitDatabase
from madtraits.datasources import registry
from madtraits.store import TraitCache

DEFAULT_DELAY = 5.0


@flow(name="build-database", log_prints=True)
def build_database(
    cache_dir: Path | str | None = None,
    datasets: list[str] | None = None,
    delay: float = DEFAULT_DELAY,
) -> TraitDatabase:
    """
    Download (or load from cache) datasets and aggregate them.

    Args:
        cache_dir: Directory of cached datasets. Datasets found there are
            loaded instead of downloaded; new downloads are saved there.
        datasets: Provider identifiers (e.g. ``["jones.2009"]``).
            None means every registered provider.
        delay: Seconds to wait after each download.

    Returns:
        The aggregated TraitDatabase. Datasets that failed are left out
        (a warning names each one).

    Raises:
        UnknownProviderError: If any requested dataset isn't registered.
            Nothing is downloaded in that case.
    """
    selected = registry.select(datasets)
    cache = TraitCache(Path(cache_dir).expanduser()) if cache_dir is not None else None
    if cache is None:
        print("No cache directory given; every dataset will be downloaded.")

    print(f"Downloading/loading {len(selected)} datasets...")
    collection = collect_datasets(selected, registry=registry, cache=cache, delay=delay)
    db = aggregate(collection.results)

    if collection.failures:
        print(f"{len(collection.failures)} datasets failed: {', '.join(collection.failed)}")
    print(db.summary())
    return db


if __name__ == "__main__":
    result = build_database(cache_dir="cache")
    print(f"Flow complete: {result!r}")
