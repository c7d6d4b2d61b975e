"""
models/car.py
-------------
Domain model for cars: the aggregate of a car, its manufacturer
and the drivers currently assigned to it.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.driver import Driver
from models.manufacturer import Manufacturer


@dataclass
class Car:
    """
    Represents a car together with its manufacturer and drivers.

    Attributes:
        id: Database primary key (None for new records).
        model: Model name (e.g., 'Corolla').
        manufacturer: The owning Manufacturer. Must carry an id to be persisted.
        drivers: Drivers currently assigned to this car.
    """
    model: str
    manufacturer: Manufacturer
    drivers: list[Driver] = field(default_factory=list)
    id: Optional[int] = None

    def driver_ids(self) -> list[int]:
        """Ids of the assigned drivers, in assignment order, without duplicates."""
        return list(dict.fromkeys(d.id for d in self.drivers))

    def __str__(self) -> str:
        return f"#{self.id} {self.manufacturer.name} {self.model} ({len(self.drivers)} drivers)"
