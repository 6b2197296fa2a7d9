"""Concatenate per-dataset results into one TraitDatabase."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from madtraits.collect import TaggedResult
from madtraits.database import TraitDatabase
from madtraits.datasources.models import TABLE_COLUMNS


def aggregate(results: Iterable[TaggedResult]) -> TraitDatabase:
    """
    Stack every dataset's tables, in order, into one database.

    Rows are unioned as-is (no deduplication, no coercion). If no dataset
    has a numeric (or categorical) table, that table is None in the result,
    not an empty DataFrame.
    """
    results = list(results)
    return TraitDatabase(
        numeric=_concat([r.numeric for r in results]),
        categorical=_concat([r.categorical for r in results]),
    )


def _concat(tables: list[pd.DataFrame | None]) -> pd.DataFrame | None:
    present = [t.loc[:, list(TABLE_COLUMNS)] for t in tables if t is not None]
    if not present:
        return None
    return pd.concat(present, ignore_index=True)
