"""Fleet roster helpers."""

from typing import Iterable

from .errors import DuplicateFleetNumber
from .models import Vehicle


def build_roster(vehicles: Iterable[Vehicle]) -> dict[str, Vehicle]:
    """Index vehicles by fleet number, rejecting duplicates."""
    roster: dict[str, Vehicle] = {}
    for vehicle in vehicles:
        if vehicle.fleet_number in roster:
            raise DuplicateFleetNumber(vehicle.fleet_number)
        roster[vehicle.fleet_number] = vehicle
    return roster


def with_last_inspection(vehicle: Vehicle, inspection_date: str) -> Vehicle:
    """Copy of `vehicle` with its last inspection date moved forward, never back."""
    if vehicle.last_inspection_date and vehicle.last_inspection_date >= inspection_date:
        return vehicle
    return vehicle.model_copy(update={"last_inspection_date": inspection_date})
