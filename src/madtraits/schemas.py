"""
Domain models for MADtraits.

Pydantic models for records and summaries handed to callers. The tables
themselves are pandas DataFrames; these models define their canonical schema.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# =============================================================================
# Observations
# =============================================================================


class TableKind(StrEnum):
    """The two observation tables of a trait database."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class ObservationRecord(BaseModel):
    """One species-trait measurement with provenance."""

    model_config = {"str_strip_whitespace": True, "frozen": True}

    species: str = Field(..., min_length=1, description="Normalized taxon, e.g. quercus_robur")
    variable: str = Field(..., min_length=1, description="Trait name")
    value: float | str
    units: str | None = None
    metadata: str | None = None
    dataset: str = Field(..., min_length=1, description="Provider identifier")


# =============================================================================
# Summaries
# =============================================================================


class TableSummary(BaseModel):
    """Distinct species, distinct traits, and row count of one table."""

    species: int = 0
    traits: int = 0
    records: int = 0


class DatabaseSummary(BaseModel):
    """Counts per table and combined.

    ``total.species`` is the union of species across both tables, not the sum.
    """

    numeric: TableSummary = Field(default_factory=TableSummary)
    categorical: TableSummary = Field(default_factory=TableSummary)
    total: TableSummary = Field(default_factory=TableSummary)
    has_metadata: bool = False
    has_units: bool = False

    def as_rows(self) -> list[tuple[str, int, int, int]]:
        """Rows of the printed summary table."""
        return [
            (label, s.species, s.traits, s.records)
            for label, s in (
                ("Numeric", self.numeric),
                ("Categorical", self.categorical),
                ("Total", self.total),
            )
        ]

    def __str__(self) -> str:
        lines = ["A Trait DataBase containing:"]
        lines.append(f"{'':<12}{'Species':>10}{'Traits':>10}{'Data-points':>13}")
        for label, spp, traits, records in self.as_rows():
            lines.append(f"{label:<12}{spp:>10}{traits:>10}{records:>13}")
        notes = []
        if self.has_metadata:
            notes.append("Meta-data present.")
        if self.has_units:
            notes.append("Units present.")
        if notes:
            lines.append(" ".join(notes))
        return "\n".join(lines)
