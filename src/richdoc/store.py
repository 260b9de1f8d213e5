"""Read-only snapshot of the entities a document refers to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .models import AssetRecord, ComponentRecord, TableDataset


class EntityStore:
    """Synchronous, already-resolved lookups from entity id to record.

    Built once per run (see richdoc.loader.load_snapshot) and shared by any
    number of render and display passes. Lookups are total: a missing id
    returns None rather than raising.
    """

    def __init__(
        self,
        entries: Iterable[ComponentRecord] = (),
        assets: Iterable[AssetRecord] = (),
        datasets: Iterable[TableDataset] = (),
    ):
        self._entries: Mapping[str, ComponentRecord] = MappingProxyType({e.id: e for e in entries})
        self._assets: Mapping[str, AssetRecord] = MappingProxyType({a.id: a for a in assets})
        self._datasets: Mapping[str, TableDataset] = MappingProxyType({d.id: d for d in datasets})

    def resolve(self, entity_id: str | None) -> ComponentRecord | AssetRecord | None:
        """Look up an entry or asset by id (entries win on a clash)."""
        if not entity_id:
            return None
        return self._entries.get(entity_id) or self._assets.get(entity_id)

    def entry(self, entity_id: str | None) -> ComponentRecord | None:
        return self._entries.get(entity_id) if entity_id else None

    def asset(self, entity_id: str | None) -> AssetRecord | None:
        return self._assets.get(entity_id) if entity_id else None

    def dataset(self, entity_id: str | None) -> TableDataset | None:
        return self._datasets.get(entity_id) if entity_id else None

    @property
    def entry_ids(self) -> list[str]:
        return sorted(self._entries)

    @property
    def dataset_ids(self) -> list[str]:
        return sorted(self._datasets)

    def __len__(self) -> int:
        return len(self._entries) + len(self._assets)
