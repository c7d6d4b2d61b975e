"""
repositories/car_repo.py
------------------------
Data access layer for cars and their driver assignments.
All SQL queries related to the `cars` and `cars_drivers` tables live here.

Every public method runs on a single pooled connection. Mutations that
touch more than one statement (create, update) commit once at the end
and roll back as a whole on any failure.
"""

from typing import Callable, Optional

import psycopg2

from db.connection import get_connection, release_connection
from exceptions import DataProcessingError
from models.car import Car
from models.driver import Driver
from models.manufacturer import Manufacturer
from utils.logger import get_logger

logger = get_logger(__name__)

_CAR_COLUMNS = "c.id, c.model, c.manufacturer_id, m.name, m.country"


class CarRepository:
    """Repository for CRUD operations on the cars table and the cars_drivers relation."""

    def __init__(
        self,
        get_conn: Callable = get_connection,
        release_conn: Callable = release_connection,
    ):
        self._get_conn = get_conn
        self._release_conn = release_conn

    # ── CREATE ────────────────────────────────────────────

    def create(self, car: Car) -> Car:
        """
        Insert a new car and one association row per attached driver.

        Args:
            car: The Car to persist. Its manufacturer and drivers must carry ids.

        Returns:
            The same Car with its `id` populated.

        Raises:
            DataProcessingError: If any statement fails. Nothing is persisted.
        """
        sql = """
            INSERT INTO cars (model, manufacturer_id)
            VALUES (%s, %s)
            RETURNING id;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car.model, car.manufacturer.id))
                car.id = cur.fetchone()[0]
                self._insert_drivers(cur, car)
            conn.commit()
            logger.info(f"Created car #{car.id} with {len(car.drivers)} driver(s)")
            return car
        except psycopg2.Error as e:
            conn.rollback()
            car.id = None
            logger.error(f"Failed to create car {car}: {e}")
            raise DataProcessingError(f"Couldn't insert car {car!r}", e) from e
        finally:
            self._release_conn(conn)

    # ── READ ──────────────────────────────────────────────

    def get(self, car_id: int) -> Optional[Car]:
        """
        Fetch a single live car by id, with its manufacturer and drivers.

        Returns:
            A Car, or None if no non-deleted car has this id.
        """
        sql = f"""
            SELECT {_CAR_COLUMNS}
            FROM cars c
            JOIN manufacturers m ON c.manufacturer_id = m.id
            WHERE c.id = %s AND c.is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car_id,))
                row = cur.fetchone()
                if row is None:
                    return None
                car = self._row_to_car(row)
                car.drivers = self._get_drivers(cur, car.id)
                return car
        except psycopg2.Error as e:
            logger.error(f"Failed to get car #{car_id}: {e}")
            raise DataProcessingError(f"Couldn't get car by id {car_id}", e) from e
        finally:
            self._release_conn(conn)

    def get_all(self) -> list[Car]:
        """Get every live car. Drivers are loaded with one query per car."""
        sql = f"""
            SELECT {_CAR_COLUMNS}
            FROM cars c
            JOIN manufacturers m ON c.manufacturer_id = m.id
            WHERE c.is_deleted = FALSE
            ORDER BY c.id;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return self._fetch_cars_with_drivers(cur)
        except psycopg2.Error as e:
            logger.error(f"Failed to get all cars: {e}")
            raise DataProcessingError("Couldn't get all cars from DB", e) from e
        finally:
            self._release_conn(conn)

    def get_all_by_driver(self, driver_id: int) -> list[Car]:
        """
        Get every live car the given driver is currently assigned to.

        Args:
            driver_id: Primary key of the driver.

        Returns:
            List of Car objects, each with its full driver list.
        """
        sql = f"""
            SELECT {_CAR_COLUMNS}
            FROM cars c
            JOIN manufacturers m ON c.manufacturer_id = m.id
            JOIN cars_drivers cd ON c.id = cd.car_id
            WHERE cd.driver_id = %s AND c.is_deleted = FALSE
            ORDER BY c.id;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (driver_id,))
                return self._fetch_cars_with_drivers(cur)
        except psycopg2.Error as e:
            logger.error(f"Failed to get cars of driver #{driver_id}: {e}")
            raise DataProcessingError(
                f"Couldn't get all cars by driver id {driver_id}", e
            ) from e
        finally:
            self._release_conn(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, car: Car) -> Car:
        """
        Overwrite a live car's model and manufacturer, then replace its
        association rows with one per driver in `car.drivers`.

        The replacement is delete-all then insert-all, in the same transaction
        as the scalar update. If no live car has `car.id`, the association
        rows are left untouched.

        Returns:
            The same Car object.

        Raises:
            DataProcessingError: If any statement fails. Nothing is persisted.
        """
        sql = """
            UPDATE cars SET model = %s, manufacturer_id = %s
            WHERE id = %s AND is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car.model, car.manufacturer.id, car.id))
                if cur.rowcount > 0:
                    cur.execute("DELETE FROM cars_drivers WHERE car_id = %s;", (car.id,))
                    self._insert_drivers(cur, car)
                    updated = True
                else:
                    updated = False
            conn.commit()
            if updated:
                logger.info(f"Updated car #{car.id} with {len(car.drivers)} driver(s)")
            else:
                logger.warning(f"Car #{car.id} not updated: no live row with this id")
            return car
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update car #{car.id}: {e}")
            raise DataProcessingError(f"Couldn't update car {car!r}", e) from e
        finally:
            self._release_conn(conn)

    def add_driver(self, car_id: int, driver_id: int) -> bool:
        """
        Assign a single live driver to a live car.

        Returns:
            True if a new association row was written, False if the pair
            already existed or the car or driver is missing or deleted.
        """
        sql = """
            INSERT INTO cars_drivers (car_id, driver_id)
            SELECT %s, %s
            WHERE EXISTS (SELECT 1 FROM cars WHERE id = %s AND is_deleted = FALSE)
              AND EXISTS (SELECT 1 FROM drivers WHERE id = %s AND is_deleted = FALSE)
            ON CONFLICT (car_id, driver_id) DO NOTHING;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car_id, driver_id, car_id, driver_id))
                added = cur.rowcount > 0
            conn.commit()
            if added:
                logger.info(f"Assigned driver #{driver_id} to car #{car_id}")
            return added
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to assign driver #{driver_id} to car #{car_id}: {e}")
            raise DataProcessingError(
                f"Couldn't add driver {driver_id} to car {car_id}", e
            ) from e
        finally:
            self._release_conn(conn)

    def remove_driver(self, car_id: int, driver_id: int) -> bool:
        """Unassign a driver from a car. Returns True if a row was removed."""
        sql = "DELETE FROM cars_drivers WHERE car_id = %s AND driver_id = %s;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car_id, driver_id))
                removed = cur.rowcount > 0
            conn.commit()
            if removed:
                logger.info(f"Unassigned driver #{driver_id} from car #{car_id}")
            return removed
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to unassign driver #{driver_id} from car #{car_id}: {e}")
            raise DataProcessingError(
                f"Couldn't remove driver {driver_id} from car {car_id}", e
            ) from e
        finally:
            self._release_conn(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, car_id: int) -> bool:
        """
        Soft-delete a car by setting its is_deleted flag.
        Association rows are kept; reads never surface them for a deleted car.

        Returns:
            True if a row was flagged.
        """
        sql = "UPDATE cars SET is_deleted = TRUE WHERE id = %s;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (car_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted car #{car_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete car #{car_id}: {e}")
            raise DataProcessingError(f"Couldn't delete car by id {car_id}", e) from e
        finally:
            self._release_conn(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_cars_with_drivers(self, cur) -> list[Car]:
        """Map every pending car row, then load drivers for each car on the same cursor."""
        cars = [self._row_to_car(r) for r in cur.fetchall()]
        for car in cars:
            car.drivers = self._get_drivers(cur, car.id)
        return cars

    @staticmethod
    def _get_drivers(cur, car_id: int) -> list[Driver]:
        """Load the live drivers currently assigned to a car."""
        sql = """
            SELECT d.id, d.name, d.license_number
            FROM drivers d
            JOIN cars_drivers cd ON d.id = cd.driver_id
            WHERE cd.car_id = %s AND d.is_deleted = FALSE
            ORDER BY d.id;
        """
        cur.execute(sql, (car_id,))
        return [
            Driver(id=r[0], name=r[1], license_number=r[2])
            for r in cur.fetchall()
        ]

    @staticmethod
    def _insert_drivers(cur, car: Car) -> None:
        """Write one association row per distinct driver of the car."""
        rows = [(car.id, driver_id) for driver_id in car.driver_ids()]
        if rows:
            cur.executemany(
                "INSERT INTO cars_drivers (car_id, driver_id) VALUES (%s, %s);",
                rows,
            )

    @staticmethod
    def _row_to_car(row: tuple) -> Car:
        """Convert a joined car/manufacturer row to a Car without drivers."""
        return Car(
            id=row[0],
            model=row[1],
            manufacturer=Manufacturer(id=row[2], name=row[3], country=row[4]),
        )
