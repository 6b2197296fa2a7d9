"""The trait database: a numeric and a categorical long-format table.

Either table may be None (absent). Absent and empty are different things:
filtering a table down to nothing makes it absent, and downstream code
(``summary``, ``to_wide``) branches on that.

Every operation returns a new TraitDatabase; the input is never mutated, so
several filtered views can be taken from one loaded database.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

import pandas as pd

from madtraits.datasources.models import TABLE_COLUMNS
from madtraits.errors import TypeContractError
from madtraits.schemas import DatabaseSummary, ObservationRecord, TableKind, TableSummary


@dataclass(frozen=True, eq=False)
class TraitDatabase:
    """Species-trait observations aggregated across datasets."""

    numeric: pd.DataFrame | None = None
    categorical: pd.DataFrame | None = None

    def __post_init__(self) -> None:
        for kind, table in self.tables():
            _check_table(kind, table)

    def tables(self) -> tuple[tuple[TableKind, pd.DataFrame | None], ...]:
        return ((TableKind.NUMERIC, self.numeric), (TableKind.CATEGORICAL, self.categorical))

    def present(self) -> list[pd.DataFrame]:
        """The tables that are not absent."""
        return [table for _, table in self.tables() if table is not None]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def species(self) -> set[str]:
        """Distinct species across both tables."""
        return self._distinct("species")

    def traits(self) -> set[str]:
        """Distinct trait names (``variable``) across both tables."""
        return self._distinct("variable")

    def datasets(self) -> list[str]:
        """Provenance tags present, sorted."""
        return sorted(self._distinct("dataset"))

    def trait_counts(self) -> pd.Series:
        """Record count per trait, numeric and categorical combined."""
        variables = [table["variable"] for table in self.present()]
        if not variables:
            return pd.Series(dtype="int64", name="count")
        return pd.concat(variables, ignore_index=True).value_counts()

    def summary(self) -> DatabaseSummary:
        """Species, trait, and record counts per table and in total."""
        per_table = {kind: _table_summary(table) for kind, table in self.tables()}
        numeric = per_table[TableKind.NUMERIC]
        categorical = per_table[TableKind.CATEGORICAL]
        total = TableSummary(
            species=len(self.species()),
            traits=numeric.traits + categorical.traits,
            records=numeric.records + categorical.records,
        )
        return DatabaseSummary(
            numeric=numeric,
            categorical=categorical,
            total=total,
            has_metadata=self._any_present("metadata"),
            has_units=self._any_present("units"),
        )

    def records(self) -> Iterator[ObservationRecord]:
        """Iterate every row as a validated ObservationRecord (numeric first)."""
        for table in self.present():
            for row in table.loc[:, list(TABLE_COLUMNS)].itertuples(index=False):
                yield ObservationRecord(
                    species=row.species,
                    variable=row.variable,
                    value=row.value,
                    units=_none_if_na(row.units),
                    metadata=_none_if_na(row.metadata),
                    dataset=row.dataset,
                )

    # -------------------------------------------------------------------------
    # Subsetting
    # -------------------------------------------------------------------------

    def filter(
        self,
        species: str | Iterable[str] | None = None,
        traits: str | Iterable[str] | None = None,
    ) -> TraitDatabase:
        """Keep only the given species and/or traits.

        Each table is filtered on its own. A table with no matching rows
        becomes absent (None) in the result, not empty. With both arguments,
        the species filter is applied first.
        """
        numeric, categorical = self.numeric, self.categorical
        if species is not None:
            keep = _as_set(species)
            numeric = _subset(numeric, "species", keep)
            categorical = _subset(categorical, "species", keep)
        if traits is not None:
            keep = _as_set(traits)
            numeric = _subset(numeric, "variable", keep)
            categorical = _subset(categorical, "variable", keep)
        return TraitDatabase(numeric=numeric, categorical=categorical)

    def __getitem__(self, key: Any) -> TraitDatabase:
        """``db[species]``, ``db[species, traits]``, ``db[:, traits]``."""
        spp, traits = key if isinstance(key, tuple) else (key, None)
        if isinstance(spp, slice) and spp == slice(None):
            spp = None
        if isinstance(traits, slice) and traits == slice(None):
            traits = None
        return self.filter(species=spp, traits=traits)

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TraitDatabase):
            return NotImplemented
        return _same_table(self.numeric, other.numeric) and _same_table(
            self.categorical, other.categorical
        )

    def __len__(self) -> int:
        return sum(len(table) for table in self.present())

    def __str__(self) -> str:
        return str(self.summary())

    def __repr__(self) -> str:
        s = self.summary()
        return (
            f"TraitDatabase(species={s.total.species}, traits={s.total.traits}, "
            f"numeric={s.numeric.records}, categorical={s.categorical.records})"
        )

    def _distinct(self, column: str) -> set[str]:
        values: set[str] = set()
        for table in self.present():
            values.update(table[column].dropna().unique())
        return values

    def _any_present(self, column: str) -> bool:
        return any(table[column].notna().any() for table in self.present())


def ensure_database(obj: object, name: str = "database") -> TraitDatabase:
    """Return ``obj`` if it is a TraitDatabase, else raise TypeContractError."""
    if not isinstance(obj, TraitDatabase):
        msg = f"'{name}' must be of type TraitDatabase, got {type(obj).__name__}"
        raise TypeContractError(msg)
    return obj


# =============================================================================
# Helpers
# =============================================================================


def _check_table(kind: str, table: object) -> None:
    if table is None:
        return
    if not isinstance(table, pd.DataFrame):
        msg = f"{kind} table must be a DataFrame or None, got {type(table).__name__}"
        raise TypeContractError(msg)
    missing = [c for c in TABLE_COLUMNS if c not in table.columns]
    if missing:
        msg = f"{kind} table is missing columns: {', '.join(missing)}"
        raise TypeContractError(msg)


def _table_summary(table: pd.DataFrame | None) -> TableSummary:
    if table is None:
        return TableSummary()
    return TableSummary(
        species=int(table["species"].nunique()),
        traits=int(table["variable"].nunique()),
        records=len(table),
    )


def _as_set(values: str | Iterable[str]) -> set[str]:
    if isinstance(values, str):
        return {values}
    return set(values)


def _subset(table: pd.DataFrame | None, column: str, keep: set[str]) -> pd.DataFrame | None:
    if table is None:
        return None
    mask = table[column].isin(keep)
    if not mask.any():
        return None
    return table.loc[mask].reset_index(drop=True)


def _same_table(a: pd.DataFrame | None, b: pd.DataFrame | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return a.reset_index(drop=True).equals(b.reset_index(drop=True))


def _none_if_na(value: Any) -> Any:
    return None if pd.isna(value) else value
