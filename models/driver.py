"""
models/driver.py
----------------
Domain model for taxi drivers.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Driver:
    """
    Represents a driver who can be assigned to cars.

    Attributes:
        id: Database primary key (None for new records).
        name: Full name.
        license_number: Driving license number, unique per driver.
    """
    name: str
    license_number: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.name} [{self.license_number}]"
