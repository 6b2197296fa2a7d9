"""Helpers for turning a wide source table into canonical long tables.

Most published trait datasets are one row per species and one column per
trait. ``melt_traits`` splits such a table into the numeric and categorical
long tables every provider must return.
"""

from __future__ import annotations

from collections.abc import Mapping

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from madtraits.datasources.models import DatasetResult, canonical_table


def normalize_species(names: pd.Series) -> pd.Series:
    """``"Quercus  Robur "`` -> ``"quercus_robur"``. Blank names become NA."""
    out = names.astype("string").str.strip().str.lower()
    out = out.str.replace(r"\s+", "_", regex=True)
    return out.where((out.str.len() > 0).fillna(False), pd.NA)


def binomial(genus: pd.Series, epithet: pd.Series) -> pd.Series:
    """Join genus and specific-epithet columns into normalized species names."""
    return normalize_species(genus.astype("string") + " " + epithet.astype("string"))


def melt_traits(
    data: pd.DataFrame,
    species: str,
    *,
    traits: list[str] | None = None,
    units: str | Mapping[str, str] | None = None,
    metadata: str | None = None,
) -> DatasetResult:
    """Reshape a species-by-trait table into a DatasetResult.

    Args:
        data: One row per observation, one column per trait.
        species: Column holding species names (normalized on the way out).
        traits: Columns to keep as traits (default: every other column).
        units: One unit string for all traits, or a mapping trait -> unit.
        metadata: Free-text note attached to every record.

    Returns:
        DatasetResult. Numeric-dtype columns go to ``numeric``, everything else
        to ``categorical``; a kind with no columns is None. Rows without a
        species or a value are dropped.
    """
    traits = traits if traits is not None else [c for c in data.columns if c != species]
    frame = data.loc[:, [species, *traits]].copy()
    frame[species] = normalize_species(frame[species])
    frame = frame[frame[species].notna()]

    numeric_cols = [
        c for c in traits if is_numeric_dtype(frame[c]) and not is_bool_dtype(frame[c])
    ]
    categorical_cols = [c for c in traits if c not in numeric_cols]

    return DatasetResult(
        numeric=_long(frame, species, numeric_cols, "numeric", units, metadata),
        categorical=_long(frame, species, categorical_cols, "categorical", units, metadata),
    )


def _long(
    frame: pd.DataFrame,
    species: str,
    columns: list[str],
    kind: str,
    units: str | Mapping[str, str] | None,
    metadata: str | None,
) -> pd.DataFrame | None:
    if not columns:
        return None
    long = frame.melt(id_vars=[species], value_vars=columns, var_name="variable")
    long = long.rename(columns={species: "species"}).dropna(subset=["value"])
    if kind == "categorical":
        long["value"] = long["value"].astype(str)
    if isinstance(units, Mapping):
        long["units"] = long["variable"].map(units)
    else:
        long["units"] = units
    long["metadata"] = metadata
    return canonical_table(long, kind)
