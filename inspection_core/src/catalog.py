"""
Checklist Catalog

Maps each vehicle type to its ordered checklist. The catalog must be total:
a vehicle type without a checklist is a configuration error, never a
runtime fallback.
"""

from pathlib import Path
from typing import Mapping, Optional, Sequence

from loguru import logger

from ..config.settings import load_checklist_config
from .errors import DuplicateChecklistItem, UnknownCategory, UnresolvedVehicleType
from .models import ChecklistItem, VehicleType


class ChecklistCatalog:
    """Read-only checklist lookup per vehicle type."""

    def __init__(
        self,
        checklists: Mapping[VehicleType, Sequence[ChecklistItem]],
        categories: Optional[Sequence[str]] = None,
    ):
        self._items: dict[VehicleType, tuple[ChecklistItem, ...]] = {}
        self._by_id: dict[VehicleType, dict[str, ChecklistItem]] = {}
        allowed = set(categories) if categories else None

        for vehicle_type in VehicleType:
            items = tuple(checklists.get(vehicle_type) or ())
            if not items:
                raise UnresolvedVehicleType(vehicle_type)

            by_id: dict[str, ChecklistItem] = {}
            for item in items:
                if item.id in by_id:
                    raise DuplicateChecklistItem(vehicle_type, item.id)
                if allowed is not None and item.category not in allowed:
                    raise UnknownCategory(item.id, item.category)
                by_id[item.id] = item

            self._items[vehicle_type] = items
            self._by_id[vehicle_type] = by_id

    @classmethod
    def from_config(cls, config: dict) -> "ChecklistCatalog":
        """Build from the `checklists.yaml` mapping."""
        raw = config.get("checklists") or {}
        checklists: dict[VehicleType, list[ChecklistItem]] = {}
        for key, items in raw.items():
            try:
                vehicle_type = VehicleType(str(key).upper())
            except ValueError:
                logger.warning(f"Ignoring checklist for unknown vehicle type {key!r}")
                continue
            checklists[vehicle_type] = [ChecklistItem.model_validate(i) for i in items or []]
        return cls(checklists, categories=config.get("categories"))

    def items_for(self, vehicle_type: VehicleType) -> tuple[ChecklistItem, ...]:
        """Ordered checklist for a vehicle type."""
        try:
            return self._items[VehicleType(vehicle_type)]
        except (KeyError, ValueError):
            raise UnresolvedVehicleType(vehicle_type) from None

    def item_ids(self, vehicle_type: VehicleType) -> frozenset[str]:
        return frozenset(item.id for item in self.items_for(vehicle_type))

    def get_item(self, vehicle_type: VehicleType, item_id: str) -> Optional[ChecklistItem]:
        self.items_for(vehicle_type)
        return self._by_id[VehicleType(vehicle_type)].get(item_id)

    @property
    def categories(self) -> list[str]:
        return sorted({item.category for items in self._items.values() for item in items})


def load_catalog(path: Path | None = None) -> ChecklistCatalog:
    """Load the catalog from YAML (defaults to `config/checklists.yaml`)."""
    catalog = ChecklistCatalog.from_config(load_checklist_config(path))
    logger.debug(f"Loaded checklist catalog: {', '.join(f'{t.value}={len(catalog.items_for(t))}' for t in VehicleType)}")
    return catalog
