"""
repositories/driver_repo.py
----------------------------
Data access layer for drivers.
Assignments of drivers to cars are handled by CarRepository.
"""

from typing import Callable, Optional

import psycopg2

from db.connection import get_connection, release_connection
from exceptions import DataProcessingError
from models.driver import Driver
from utils.logger import get_logger

logger = get_logger(__name__)


class DriverRepository:
    """Repository for CRUD operations on the drivers table."""

    def __init__(
        self,
        get_conn: Callable = get_connection,
        release_conn: Callable = release_connection,
    ):
        self._get_conn = get_conn
        self._release_conn = release_conn

    def create(self, driver: Driver) -> Driver:
        """
        Insert a new driver.

        Returns:
            The same Driver with its `id` populated.

        Raises:
            DataProcessingError: e.g. when the license number is already taken.
        """
        sql = "INSERT INTO drivers (name, license_number) VALUES (%s, %s) RETURNING id;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (driver.name, driver.license_number))
                driver.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Created driver '{driver.name}' #{driver.id}")
            return driver
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to create driver: {e}")
            raise DataProcessingError(f"Couldn't create driver {driver!r}", e) from e
        finally:
            self._release_conn(conn)

    def get(self, driver_id: int) -> Optional[Driver]:
        """Fetch a live driver by id, or None."""
        sql = """
            SELECT id, name, license_number FROM drivers
            WHERE id = %s AND is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (driver_id,))
                row = cur.fetchone()
                return self._row_to_driver(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to get driver #{driver_id}: {e}")
            raise DataProcessingError(f"Couldn't get driver by id {driver_id}", e) from e
        finally:
            self._release_conn(conn)

    def get_all(self) -> list[Driver]:
        """Get every live driver."""
        sql = "SELECT id, name, license_number FROM drivers WHERE is_deleted = FALSE ORDER BY id;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_driver(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to get all drivers: {e}")
            raise DataProcessingError("Couldn't get all drivers from DB", e) from e
        finally:
            self._release_conn(conn)

    def update(self, driver: Driver) -> Driver:
        """Overwrite name and license number of a live driver."""
        sql = """
            UPDATE drivers SET name = %s, license_number = %s
            WHERE id = %s AND is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (driver.name, driver.license_number, driver.id))
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Updated driver #{driver.id}")
            else:
                logger.warning(f"Driver #{driver.id} not updated: no live row with this id")
            return driver
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update driver #{driver.id}: {e}")
            raise DataProcessingError(f"Couldn't update driver {driver!r}", e) from e
        finally:
            self._release_conn(conn)

    def delete(self, driver_id: int) -> bool:
        """
        Soft-delete a driver. Its association rows stay in place but the
        driver no longer appears in any car's driver list.
        """
        sql = "UPDATE drivers SET is_deleted = TRUE WHERE id = %s;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (driver_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted driver #{driver_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete driver #{driver_id}: {e}")
            raise DataProcessingError(f"Couldn't delete driver by id {driver_id}", e) from e
        finally:
            self._release_conn(conn)

    @staticmethod
    def _row_to_driver(row: tuple) -> Driver:
        return Driver(id=row[0], name=row[1], license_number=row[2])
