"""
main.py
-------
Entry point for the taxi service data layer.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Walk through a short car/driver scenario and log each step.
"""

import uuid

from db.connection import init_pool, close_pool
from db.init_db import create_tables
from exceptions import DataProcessingError
from models.car import Car
from models.driver import Driver
from models.manufacturer import Manufacturer
from services.car_service import CarService
from services.driver_service import DriverService
from services.manufacturer_service import ManufacturerService
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def run_demo() -> None:
    """Create a manufacturer, drivers and a car, then reassign and delete it."""
    manufacturer_service = ManufacturerService()
    driver_service = DriverService()
    car_service = CarService()
    # License numbers are unique, so tag them per run.
    run_tag = uuid.uuid4().hex[:8]

    toyota = manufacturer_service.create(Manufacturer(name="Toyota", country="JP"))
    bob = driver_service.create(Driver(name="Bob", license_number=f"BOB-{run_tag}"))
    alice = driver_service.create(Driver(name="Alice", license_number=f"ALICE-{run_tag}"))

    corolla = car_service.create(Car(model="Corolla", manufacturer=toyota))
    logger.info(f"Created: {car_service.get(corolla.id)}")

    car_service.add_driver_to_car(bob, corolla)
    logger.info(f"After assigning Bob: {car_service.get(corolla.id)}")

    corolla.drivers = [alice]
    car_service.update(corolla)
    logger.info(f"After replacing drivers: {car_service.get(corolla.id)}")
    logger.info(f"Cars driven by Alice: {len(car_service.get_all_by_driver(alice.id))}")

    car_service.delete(corolla.id)
    logger.info(f"Live cars after delete: {len(car_service.get_all())}")


def main() -> None:
    """Initialize the database and run the demo."""

    # ── 1. Database setup ─────────────────────────────────
    configure_logging()
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Scenario ───────────────────────────────────────
    try:
        run_demo()
    except DataProcessingError as e:
        logger.error(f"Demo aborted: {e}")
        raise
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        close_pool()
        logger.info("Taxi service stopped.")


if __name__ == "__main__":
    main()
