"""MADtraits - make a database of species traits.

Architecture::

    datasources/   Dataset providers (one module per published dataset) + registry
    store.py       Durable per-provider cache (JSON envelopes, no expiry)
    collect.py     Drives providers through the cache, isolates failures
    aggregate.py   Concatenates per-dataset tables into one TraitDatabase
    database.py    The two-table container: filter, species, traits, summary
    reshape.py     Long format -> wide species-by-trait table
    flows/         Prefect orchestration (build_database)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources -> store (cache) -> collect -> aggregate -> database -> reshape

Extension points - see each package's docstring for step-by-step guides:
  - New dataset provider:   datasources/__init__.py
"""

__version__ = "0.1.0"
__author__ = "Will Pearse"

from madtraits.config import Settings
from madtraits.database import TraitDatabase
from madtraits.errors import (
    InvalidSelectionError,
    MADtraitsError,
    ProviderFailure,
    TypeContractError,
    UnknownProviderError,
)
from madtraits.reshape import to_wide

__all__ = [
    "InvalidSelectionError",
    "MADtraitsError",
    "ProviderFailure",
    "Settings",
    "TraitDatabase",
    "TypeContractError",
    "UnknownProviderError",
    "__version__",
    "to_wide",
]
