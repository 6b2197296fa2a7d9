"""Shared fixtures: small hand-built trait tables and databases."""

from __future__ import annotations

from typing import Any

import pandas as pd
import pytest

from madtraits.database import TraitDatabase
from madtraits.datasources.models import DatasetResult, canonical_table
from madtraits.datasources.registry import ProviderRegistry


def make_table(
    rows: list[tuple[Any, ...]], kind: str = "numeric", dataset: str | None = None
) -> pd.DataFrame:
    """Build a canonical table from (species, variable, value[, units[, metadata]]) tuples."""
    padded = [(*row, *([None] * (5 - len(row)))) for row in rows]
    frame = pd.DataFrame(padded, columns=["species", "variable", "value", "units", "metadata"])
    table = canonical_table(frame, kind, dataset)
    assert table is not None
    return table


@pytest.fixture
def oak_db() -> TraitDatabase:
    """Two oaks and a beech across two datasets, numeric and categorical."""
    numeric = pd.concat(
        [
            make_table(
                [
                    ("quercus_robur", "height", 12.0, "m"),
                    ("quercus_robur", "height", 14.0, "m"),
                    ("quercus_ilex", "height", 8.0, "m"),
                    ("quercus_robur", "sla", 11.5, "mm2/mg"),
                ],
                dataset="x.2001",
            ),
            make_table([("fagus_sylvatica", "height", 30.0, "m")], dataset="y.2002"),
        ],
        ignore_index=True,
    )
    categorical = make_table(
        [
            ("quercus_robur", "leaf_habit", "deciduous"),
            ("quercus_ilex", "leaf_habit", "evergreen"),
            ("fagus_sylvatica", "leaf_habit", "deciduous"),
            ("fagus_sylvatica", "pollination", "wind"),
        ],
        kind="categorical",
        dataset="y.2002",
    )
    return TraitDatabase(numeric=numeric, categorical=categorical)


@pytest.fixture
def providers() -> ProviderRegistry:
    """A fresh registry with two working providers and one that always fails."""
    reg = ProviderRegistry()

    @reg.register("alpha.2001")
    def alpha() -> DatasetResult:
        return DatasetResult(
            numeric=make_table([("quercus_robur", "height", 12.0, "m")]),
        )

    @reg.register("beta.2002")
    def beta() -> DatasetResult:
        return DatasetResult(
            numeric=make_table([("quercus_ilex", "height", 8.0, "m")]),
            categorical=make_table(
                [("quercus_ilex", "leaf_habit", "evergreen")], kind="categorical"
            ),
        )

    @reg.register("broken.2003")
    def broken() -> DatasetResult:
        msg = "server said no"
        raise ConnectionError(msg)

    return reg
