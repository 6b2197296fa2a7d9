"""
Prefect flows.

Flows:
- build: Download/load every dataset and aggregate into a TraitDatabase

Usage (local):
    python -m madtraits.flows.build

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m madtraits.flows.build
"""
