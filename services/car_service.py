"""
services/car_service.py
------------------------
Business logic for cars and their driver assignments.
"""

from typing import Optional

from exceptions import EntityNotFoundError
from models.car import Car
from models.driver import Driver
from repositories.car_repo import CarRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class CarService:
    """Coordinates car persistence and driver assignment."""

    def __init__(self, car_repo: Optional[CarRepository] = None):
        self.car_repo = car_repo or CarRepository()

    def create(self, car: Car) -> Car:
        return self.car_repo.create(car)

    def get(self, car_id: int) -> Car:
        """
        Fetch a live car by id.

        Raises:
            EntityNotFoundError: If the car does not exist or was deleted.
        """
        car = self.car_repo.get(car_id)
        if car is None:
            raise EntityNotFoundError("Car", car_id)
        return car

    def get_all(self) -> list[Car]:
        return self.car_repo.get_all()

    def update(self, car: Car) -> Car:
        return self.car_repo.update(car)

    def delete(self, car_id: int) -> bool:
        return self.car_repo.delete(car_id)

    def get_all_by_driver(self, driver_id: int) -> list[Car]:
        return self.car_repo.get_all_by_driver(driver_id)

    def add_driver_to_car(self, driver: Driver, car: Car) -> Car:
        """
        Assign a driver to a car and mirror it in `car.drivers`.

        The in-memory list is only extended when a new association row was
        written and the driver is not already in it.
        """
        added = self.car_repo.add_driver(car.id, driver.id)
        if not added:
            logger.warning(
                f"Driver #{driver.id} not assigned to car #{car.id}: "
                f"already assigned, or car or driver missing"
            )
            return car
        if driver.id not in car.driver_ids():
            car.drivers.append(driver)
        logger.info(f"Driver #{driver.id} now drives car #{car.id}")
        return car

    def remove_driver_from_car(self, driver: Driver, car: Car) -> Car:
        """Unassign a driver from a car and drop it from `car.drivers`."""
        removed = self.car_repo.remove_driver(car.id, driver.id)
        car.drivers = [d for d in car.drivers if d.id != driver.id]
        if not removed:
            logger.warning(f"Driver #{driver.id} was not assigned to car #{car.id}")
        return car
