"""Per-dataset result contract shared by every provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from madtraits.errors import TypeContractError

# Columns a provider must return in each table
PROVIDER_COLUMNS = ("species", "variable", "value", "units", "metadata")
# Columns once the collector has tagged provenance
TABLE_COLUMNS = (*PROVIDER_COLUMNS, "dataset")

VALUE_DTYPES = {"numeric": "float64", "categorical": "object"}


@dataclass(frozen=True)
class DatasetResult:
    """What a provider returns: a numeric and a categorical long table.

    Either table may be None when the source has no data of that kind.
    An empty DataFrame is still a present table.
    """

    numeric: pd.DataFrame | None = None
    categorical: pd.DataFrame | None = None

    def validate(self) -> DatasetResult:
        """Check the contract and return a copy with canonical columns and dtypes.

        Raises TypeContractError if a present table is not a DataFrame, lacks a
        required column, or holds values that cannot be cast to its kind
        (e.g. ``"12 m"`` in the numeric table).
        """
        for kind, table in self.tables():
            if table is None:
                continue
            if not isinstance(table, pd.DataFrame):
                msg = f"{kind} table must be a DataFrame, got {type(table).__name__}"
                raise TypeContractError(msg)
            missing = [c for c in PROVIDER_COLUMNS if c not in table.columns]
            if missing:
                msg = f"{kind} table is missing columns: {', '.join(missing)}"
                raise TypeContractError(msg)
        return DatasetResult(
            numeric=canonical_table(self.numeric, "numeric"),
            categorical=canonical_table(self.categorical, "categorical"),
        )

    def tables(self) -> tuple[tuple[str, pd.DataFrame | None], ...]:
        return (("numeric", self.numeric), ("categorical", self.categorical))

    def tagged(self, dataset: str) -> DatasetResult:
        """Return a copy with ``dataset`` set on every row of every present table."""
        return DatasetResult(
            numeric=canonical_table(self.numeric, "numeric", dataset),
            categorical=canonical_table(self.categorical, "categorical", dataset),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (absent tables become None)."""
        return {kind: _records(table) for kind, table in self.tables()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatasetResult:
        """Inverse of :meth:`to_dict`."""
        return cls(
            numeric=_frame(data.get("numeric"), "numeric"),
            categorical=_frame(data.get("categorical"), "categorical"),
        )


def canonical_table(
    table: pd.DataFrame | None, kind: str, dataset: str | None = None
) -> pd.DataFrame | None:
    """Project a table onto the canonical columns with canonical dtypes.

    Missing ``units``/``metadata`` become None. With ``dataset`` given, the
    provenance column is added.
    """
    if table is None:
        return None
    out = table.loc[:, list(PROVIDER_COLUMNS)].copy()
    try:
        out["value"] = out["value"].astype(VALUE_DTYPES[kind])
    except (TypeError, ValueError) as exc:
        msg = f"{kind} table has values that are not {VALUE_DTYPES[kind]}: {exc}"
        raise TypeContractError(msg) from exc
    for col in ("species", "variable", "units", "metadata"):
        out[col] = out[col].astype(object).where(out[col].notna(), None)
    if dataset is not None:
        out["dataset"] = dataset
    return out.reset_index(drop=True)


def _records(table: pd.DataFrame | None) -> list[dict[str, Any]] | None:
    if table is None:
        return None
    # object + where() turns NaN into None so json.dump writes null
    clean = table.loc[:, list(PROVIDER_COLUMNS)].astype(object)
    clean = clean.where(clean.notna(), None)
    return clean.to_dict(orient="records")


def _frame(records: list[dict[str, Any]] | None, kind: str) -> pd.DataFrame | None:
    if records is None:
        return None
    frame = pd.DataFrame.from_records(records, columns=list(PROVIDER_COLUMNS))
    return canonical_table(frame, kind)
