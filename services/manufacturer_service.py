"""
services/manufacturer_service.py
---------------------------------
Business logic for manufacturers.
"""

from typing import Optional

from exceptions import EntityNotFoundError
from models.manufacturer import Manufacturer
from repositories.manufacturer_repo import ManufacturerRepository


class ManufacturerService:
    """Thin CRUD facade over ManufacturerRepository."""

    def __init__(self, manufacturer_repo: Optional[ManufacturerRepository] = None):
        self.manufacturer_repo = manufacturer_repo or ManufacturerRepository()

    def create(self, manufacturer: Manufacturer) -> Manufacturer:
        return self.manufacturer_repo.create(manufacturer)

    def get(self, manufacturer_id: int) -> Manufacturer:
        """Fetch a live manufacturer or raise EntityNotFoundError."""
        manufacturer = self.manufacturer_repo.get(manufacturer_id)
        if manufacturer is None:
            raise EntityNotFoundError("Manufacturer", manufacturer_id)
        return manufacturer

    def get_all(self) -> list[Manufacturer]:
        return self.manufacturer_repo.get_all()

    def update(self, manufacturer: Manufacturer) -> Manufacturer:
        return self.manufacturer_repo.update(manufacturer)

    def delete(self, manufacturer_id: int) -> bool:
        return self.manufacturer_repo.delete(manufacturer_id)
