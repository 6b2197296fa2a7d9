"""Durable per-provider cache of dataset results.

One JSON file per provider identifier, named from the identifier with its
separator characters stripped (``jones.2009`` -> ``jones2009.json``). Every
file is wrapped in a metadata envelope::

    {"meta": {"source": "jones.2009", "fetched_at": "..."},
     "data": {"numeric": [...], "categorical": null}}

An absent table is stored as ``null`` and comes back as None, never as an
empty table. There is no expiry: once a dataset is cached it is served from
disk until the file is deleted.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 — used at runtime, not just annotations
from typing import Any

from madtraits.datasources.models import DatasetResult
from madtraits.datasources.registry import compact_name

CACHE_SUFFIX = ".json"


def cache_filename(key: str) -> str:
    """File name for a provider identifier: separators stripped, fixed suffix."""
    stem = compact_name(key)
    if not stem:
        msg = f"Cannot derive a cache file name from {key!r}"
        raise ValueError(msg)
    return stem + CACHE_SUFFIX


class TraitCache:
    """Read/write cached DatasetResults under one directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def path(self, key: str) -> Path:
        """Absolute location of the cache file for ``key``."""
        return self._resolve(Path(cache_filename(key)))

    def get(self, key: str) -> DatasetResult | None:
        """Cached result for ``key``, or None if nothing is cached."""
        data = self.read(Path(cache_filename(key)))
        if data is None:
            return None
        return DatasetResult.from_dict(data)

    def put(self, key: str, result: DatasetResult) -> Path:
        """Persist ``result`` so later runs see it via :meth:`get`."""
        return self.write(Path(cache_filename(key)), result.to_dict(), source=key)

    def keys(self) -> list[str]:
        """Sources of every cached file, sorted."""
        keys = []
        for file in sorted(self.base.glob(f"*{CACHE_SUFFIX}")):
            meta = self._read_envelope(file).get("meta", {})
            keys.append(meta.get("source", file.stem))
        return sorted(keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.path(key).exists()

    # -------------------------------------------------------------------------
    # Envelope I/O
    # -------------------------------------------------------------------------

    def read(self, path: Path) -> dict[str, Any] | None:
        """Read the ``data`` payload of an envelope, or None if the file doesn't exist."""
        full = self._resolve(path)
        if not full.exists():
            return None
        envelope = self._read_envelope(full)
        result: dict[str, Any] = envelope.get("data", envelope)
        return result

    def write(self, path: Path, data: Any, source: str, **params: Any) -> Path:
        """Write ``data`` wrapped in a metadata envelope.

        Args:
            path: Path relative to the cache directory.
            data: Payload to store under the ``data`` key.
            source: Provider identifier.
            **params: Extra metadata fields.

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)

        # Temp file + rename: readers see the old file or the new one, never a partial write
        fd, tmp = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump({"meta": meta, "data": data}, f)
            os.replace(tmp, full)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

        return full

    def _read_envelope(self, full: Path) -> dict[str, Any]:
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes cache directory: {path}"
            raise ValueError(msg) from None
        return full
