"""Amniote life-history database (birds, mammals, reptiles).

Myhrvold et al. (2015) Ecology 96:3109. ESA data paper E096-269.
"""

from __future__ import annotations

from madtraits.datasources.client import ESA_ARCHIVE, fetch_table, units_from_suffix
from madtraits.datasources.models import DatasetResult
from madtraits.datasources.registry import registry
from madtraits.datasources.tables import binomial, melt_traits

AMNIOTE_URL = f"{ESA_ARCHIVE}/E096/269/Data_Files/Amniote_Database_Aug_2015.csv"

TAXONOMY_COLUMNS = ["class", "order", "family", "genus", "species", "subspecies", "common_name"]


@registry.register("myhrvold.2015")
def myhrvold_2015() -> DatasetResult:
    """Download the amniote database; species are ``genus_species``."""
    data = fetch_table(AMNIOTE_URL)
    traits = [c for c in data.columns if c not in TAXONOMY_COLUMNS]
    data["taxon"] = binomial(data["genus"], data["species"])
    return melt_traits(
        data,
        "taxon",
        traits=traits,
        units=units_from_suffix(traits),
    )
