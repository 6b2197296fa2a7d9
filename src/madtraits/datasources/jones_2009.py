"""PanTHERIA: life history, ecology, and geography of extant mammals.

Jones et al. (2009) Ecology 90:2648. ESA data paper E090-184.
Tab-delimited, one row per species, ``-999`` for missing values.
"""

from __future__ import annotations

from madtraits.datasources.client import ESA_ARCHIVE, fetch_table, units_from_suffix
from madtraits.datasources.models import DatasetResult
from madtraits.datasources.registry import registry
from madtraits.datasources.tables import melt_traits

PANTHERIA_URL = f"{ESA_ARCHIVE}/E090/184/PanTHERIA_1-0_WR05_Aug2008.txt"
SPECIES_COLUMN = "MSW05_Binomial"


@registry.register("jones.2009")
def jones_2009() -> DatasetResult:
    """Download PanTHERIA and melt its trait columns.

    Trait columns are the numbered ones (``5-1_AdultBodyMass_g`` etc.);
    the MSW05 taxonomy columns and ``References`` are dropped.
    """
    data = fetch_table(PANTHERIA_URL, sep="\t")
    traits = [c for c in data.columns if c[:1].isdigit()]
    return melt_traits(
        data,
        SPECIES_COLUMN,
        traits=traits,
        units=units_from_suffix(traits),
        metadata="PanTHERIA 1.0 (WR05)",
    )
