"""
Aggregation Engine - Fleet-wide inspection statistics.

Computes, in a single pass over a collection of inspections:
- total / OK / NOK counts (partitioned by the status classifier)
- failed checklist items per category
- the most recent NOK inspections (input order, capped)

Records are expected pre-ordered by the caller (newest first for the
alert feed). The engine keeps no state between calls.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger

from ..config.settings import RECENT_ALERTS_LIMIT
from .catalog import ChecklistCatalog
from .classifier import classify, failed_results
from .errors import UnresolvedVehicleType
from .models import InspectionRecord, InspectionStatus


@dataclass
class FleetStats:
    """Derived statistics over a set of inspections."""
    total: int = 0
    ok_count: int = 0
    nok_count: int = 0
    category_issue_counts: dict[str, int] = field(default_factory=dict)
    recent_alerts: list[InspectionRecord] = field(default_factory=list)

    @property
    def ok_rate(self) -> float:
        return self.ok_count / self.total if self.total else 0.0

    @property
    def nok_rate(self) -> float:
        return self.nok_count / self.total if self.total else 0.0

    def status_breakdown(self) -> list[dict]:
        """Pie-chart series: OK vs NOK inspections."""
        return [
            {"name": InspectionStatus.OK.value, "value": self.ok_count},
            {"name": InspectionStatus.NOK.value, "value": self.nok_count},
        ]

    def category_breakdown(self) -> list[dict]:
        """Bar-chart series: failed items per category."""
        return [{"name": name, "issues": count} for name, count in self.category_issue_counts.items()]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "ok_count": self.ok_count,
            "nok_count": self.nok_count,
            "ok_rate": round(self.ok_rate, 4),
            "nok_rate": round(self.nok_rate, 4),
            "category_issue_counts": dict(self.category_issue_counts),
            "status_breakdown": self.status_breakdown(),
            "category_breakdown": self.category_breakdown(),
            "recent_alerts": [alert_to_dict(r) for r in self.recent_alerts],
        }


def alert_to_dict(record: InspectionRecord) -> dict:
    """Record payload for the alert feed, with its failing items."""
    payload = record.model_dump(mode="json")
    payload["status"] = classify(record).value
    payload["failed_results"] = [r.model_dump(mode="json") for r in failed_results(record)]
    return payload


def _countable_failures(record: InspectionRecord, catalog: Optional[ChecklistCatalog]):
    """NOK results that may be counted per category.

    Repeats of an item id within the record are always skipped. With a
    catalog, results for item ids unknown to the vehicle type are skipped too.
    """
    known = None
    if catalog is not None:
        try:
            known = catalog.item_ids(record.vehicle.type)
        except UnresolvedVehicleType:
            logger.warning(f"Inspection {record.id}: no checklist for {record.vehicle.type}, skipping category counts")
            return []

    seen: set[str] = set()
    countable = []
    for result in record.results:
        if result.item_id in seen:
            logger.warning(f"Inspection {record.id}: repeated item {result.item_id!r} excluded from counts")
            continue
        seen.add(result.item_id)
        if result.status != InspectionStatus.NOK:
            continue
        if known is not None and result.item_id not in known:
            logger.warning(f"Inspection {record.id}: unknown item {result.item_id!r} excluded from counts")
            continue
        countable.append(result)
    return countable


def aggregate(
    records: Iterable[InspectionRecord],
    *,
    alert_limit: Optional[int] = None,
    catalog: Optional[ChecklistCatalog] = None,
) -> FleetStats:
    """
    Aggregate a collection of inspections.

    Args:
        records: Inspections, already filtered and ordered by the caller
        alert_limit: Max size of the alert feed (default RECENT_ALERTS_LIMIT)
        catalog: Optional catalog used to exclude unexpected results from
            category counts

    Returns:
        FleetStats; an empty input yields all zeros and empty collections
    """
    limit = RECENT_ALERTS_LIMIT if alert_limit is None else max(alert_limit, 0)
    stats = FleetStats()

    for record in records:
        stats.total += 1
        if classify(record) == InspectionStatus.OK:
            stats.ok_count += 1
            continue

        stats.nok_count += 1
        if len(stats.recent_alerts) < limit:
            stats.recent_alerts.append(record)
        for result in _countable_failures(record, catalog):
            stats.category_issue_counts[result.category] = (
                stats.category_issue_counts.get(result.category, 0) + 1
            )

    return stats


def last_inspection_dates(records: Iterable[InspectionRecord]) -> dict[str, str]:
    """Most recent inspection day (YYYY-MM-DD) per fleet number."""
    latest: dict[str, str] = {}
    for record in records:
        day = record.date.date().isoformat()
        fleet_number = record.vehicle.fleet_number
        if day > latest.get(fleet_number, ""):
            latest[fleet_number] = day
    return latest
