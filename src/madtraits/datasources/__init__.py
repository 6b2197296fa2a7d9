"""Dataset providers.

Each provider is one module, named after the dataset's citation
(``{first_author}_{year}.py``), exposing one function registered under the
identifier ``"{first_author}.{year}"``::

    datasources/
    ├── __init__.py       # Imports every provider so it registers
    ├── registry.py       # ProviderRegistry + default ``registry``
    ├── models.py         # DatasetResult contract
    ├── tables.py         # Wide -> long helpers (melt_traits, normalize_species)
    ├── client.py         # Download helpers, missing-value sentinels, units
    └── {author}_{year}.py

Adding a new provider
---------------------
1. Create ``datasources/{author}_{year}.py`` with one function that takes no
   arguments and returns a ``DatasetResult``::

       @registry.register("smith.2020")
       def smith_2020() -> DatasetResult:
           data = fetch_table(SMITH_URL)
           return melt_traits(data, "Species", units={"height_m": "m"})

   Raise on any download or parse problem; the collector reports the failure
   and carries on with the other datasets.

2. Import the module below so it registers on package import.

3. Add tests in ``tests/test_providers.py`` with ``session.get`` patched.
"""

from madtraits.datasources import jones_2009, myhrvold_2015
from madtraits.datasources.models import PROVIDER_COLUMNS, TABLE_COLUMNS, DatasetResult
from madtraits.datasources.registry import (
    ProviderFunc,
    ProviderRegistry,
    normalize_name,
    registry,
)
from madtraits.datasources.tables import binomial, melt_traits, normalize_species

__all__ = [
    "PROVIDER_COLUMNS",
    "TABLE_COLUMNS",
    "DatasetResult",
    "ProviderFunc",
    "ProviderRegistry",
    "binomial",
    "jones_2009",
    "melt_traits",
    "myhrvold_2015",
    "normalize_name",
    "normalize_species",
    "registry",
]
