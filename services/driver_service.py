"""
services/driver_service.py
---------------------------
Business logic for drivers.
"""

from typing import Optional

from exceptions import EntityNotFoundError
from models.driver import Driver
from repositories.driver_repo import DriverRepository


class DriverService:
    """Thin CRUD facade over DriverRepository."""

    def __init__(self, driver_repo: Optional[DriverRepository] = None):
        self.driver_repo = driver_repo or DriverRepository()

    def create(self, driver: Driver) -> Driver:
        return self.driver_repo.create(driver)

    def get(self, driver_id: int) -> Driver:
        """Fetch a live driver or raise EntityNotFoundError."""
        driver = self.driver_repo.get(driver_id)
        if driver is None:
            raise EntityNotFoundError("Driver", driver_id)
        return driver

    def get_all(self) -> list[Driver]:
        return self.driver_repo.get_all()

    def update(self, driver: Driver) -> Driver:
        return self.driver_repo.update(driver)

    def delete(self, driver_id: int) -> bool:
        return self.driver_repo.delete(driver_id)
