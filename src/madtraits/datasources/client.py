"""Download helpers shared by dataset providers.

Most sources are flat files on publisher archives (Ecological Archives,
Dryad, figshare). Every download goes through the shared retrying session.
"""

from __future__ import annotations

import io
from typing import Any

import pandas as pd

from madtraits.services.http import session

# Ecological Archives data papers
ESA_ARCHIVE = "http://esapubs.org/archive/ecol"

# Sentinels publishers use for "not measured"
MISSING_VALUES = ["-999", "-999.0", "-999.00", "NA", ""]

# Trailing unit tokens in column names like ``adult_body_mass_g``
UNIT_SUFFIXES = {
    "g": "g",
    "kg": "kg",
    "mm": "mm",
    "cm": "cm",
    "d": "days",
    "m": "months",
    "y": "years",
    "n": "count",
    "km2": "km2",
    "dC": "degrees C",
}


def fetch_text(url: str) -> str:
    """GET ``url`` and return the decoded body; raises on HTTP errors."""
    resp = session.get(url)
    resp.raise_for_status()
    return resp.text


def fetch_table(url: str, **read_csv_kwargs: Any) -> pd.DataFrame:
    """Download a delimited file and parse it with :func:`pandas.read_csv`.

    Publisher missing-value sentinels are parsed as NA unless ``na_values``
    is passed explicitly.
    """
    read_csv_kwargs.setdefault("na_values", MISSING_VALUES)
    return pd.read_csv(io.StringIO(fetch_text(url)), **read_csv_kwargs)


def units_from_suffix(columns: list[str], sep: str = "_") -> dict[str, str]:
    """Map each column to the unit named by its trailing token, when known."""
    units: dict[str, str] = {}
    for col in columns:
        suffix = col.rsplit(sep, 1)[-1] if sep in col else ""
        if suffix in UNIT_SUFFIXES:
            units[col] = UNIT_SUFFIXES[suffix]
    return units
