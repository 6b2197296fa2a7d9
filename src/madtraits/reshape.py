"""Pivot a long-format TraitDatabase into a wide species-by-trait table.

Each (species, trait) cell holds one value aggregated from every matching
record: ``num_agg`` over numeric observations (default: mean) and
``cat_agg`` over categorical ones (default: the most frequent value).

Don't pivot a whole database. There are thousands of traits, so filter
down to the species and traits you need first, or ask for the top-k traits::

    wide = to_wide(db.filter(species=my_species), 10)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from numbers import Integral
from typing import Any

import pandas as pd

from madtraits.database import TraitDatabase, ensure_database
from madtraits.errors import InvalidSelectionError

Aggregator = Callable[[pd.Series], Any]

DEFAULT_TRAIT_COUNT = 10


def mean(values: pd.Series) -> float:
    """Arithmetic mean, ignoring missing values."""
    return float(values.mean())


def mode(values: pd.Series) -> Any:
    """Most frequent value; ties go to the value seen first. None if empty."""
    counts = Counter(values.dropna())
    if not counts:
        return None
    # Counter keeps insertion order and max() returns the first maximum
    return max(counts, key=counts.__getitem__)


def select_traits(database: TraitDatabase, selection: int | str | Iterable[str]) -> list[str]:
    """Resolve a trait selection to a list of trait names.

    Args:
        database: Database the counts are taken from.
        selection: ``k`` -> the k traits with the most records (numeric and
            categorical combined), ties broken by name; a name or collection
            of names -> used as given.

    Raises:
        InvalidSelectionError: For anything else, a non-positive ``k``, or
            an empty collection.
    """
    if isinstance(selection, bool):
        msg = "Trait selection must be a count or trait names, not a bool"
        raise InvalidSelectionError(msg)

    if isinstance(selection, Integral):
        k = int(selection)
        if k < 1:
            msg = f"Trait count must be positive, got {k}"
            raise InvalidSelectionError(msg)
        counts = database.trait_counts()
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [name for name, _ in ranked[:k]]

    if isinstance(selection, str):
        return [selection]

    if isinstance(selection, (list, tuple, set, frozenset, pd.Index, pd.Series)):
        names = list(selection)
        if isinstance(selection, (set, frozenset)):
            names = sorted(names)
        if not names:
            msg = "Trait selection is empty"
            raise InvalidSelectionError(msg)
        if not all(isinstance(n, str) for n in names):
            msg = "Trait names must all be strings"
            raise InvalidSelectionError(msg)
        return names

    msg = (
        "Either too few/many variables requested, or data not requested by name "
        f"(got {type(selection).__name__})"
    )
    raise InvalidSelectionError(msg)


def to_wide(
    database: TraitDatabase,
    selected_traits: int | str | Iterable[str] = DEFAULT_TRAIT_COUNT,
    num_agg: Aggregator = mean,
    cat_agg: Aggregator = mode,
) -> pd.DataFrame:
    """
    Summarize a database to one row per species and one column per trait.

    Args:
        database: The (ideally pre-filtered) database.
        selected_traits: Number of best-covered traits, or trait names.
        num_agg: Reduces the numeric values of one (species, trait) cell.
        cat_agg: Reduces the categorical values of one cell.

    Returns:
        DataFrame with a ``species`` column followed by trait columns in name
        order, rows sorted by species. Numeric and categorical halves are
        outer-joined on species, so a species missing from one half has NaN
        in that half's columns. Empty (only ``species``) if nothing matches.
    """
    db = ensure_database(database)
    for label, func in (("num_agg", num_agg), ("cat_agg", cat_agg)):
        if not callable(func):
            msg = f"'{label}' must be a function to summarise data"
            raise InvalidSelectionError(msg)

    subset = db.filter(traits=select_traits(db, selected_traits))
    halves = [
        wide
        for wide in (_pivot(subset.numeric, num_agg), _pivot(subset.categorical, cat_agg))
        if wide is not None
    ]

    if not halves:
        return pd.DataFrame(columns=["species"])
    wide = halves[0] if len(halves) == 1 else _join(*halves)

    traits = sorted(c for c in wide.columns if c != "species")
    return wide.loc[:, ["species", *traits]].sort_values("species").reset_index(drop=True)


def _join(numeric: pd.DataFrame, categorical: pd.DataFrame) -> pd.DataFrame:
    """Outer-join the two halves on species, one column per trait.

    A trait recorded both numerically and categorically keeps the numeric
    cell; the categorical cell is used only where the numeric one is missing.
    """
    shared = sorted((set(numeric.columns) & set(categorical.columns)) - {"species"})
    wide = numeric.merge(categorical.drop(columns=shared), on="species", how="outer")
    if shared:
        fallback = wide.loc[:, ["species"]].merge(
            categorical.loc[:, ["species", *shared]], on="species", how="left"
        )
        for trait in shared:
            cells = wide[trait].astype(object)
            wide[trait] = cells.where(cells.notna(), fallback[trait])
    return wide


def _pivot(table: pd.DataFrame | None, func: Aggregator) -> pd.DataFrame | None:
    """Group one long table by (species, variable), aggregate, and unstack."""
    if table is None:
        return None
    cells = table.groupby(["species", "variable"], sort=True)["value"].agg(func)
    wide = cells.unstack("variable")
    wide.columns.name = None
    return wide.reset_index()
