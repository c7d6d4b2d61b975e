"""
repositories/manufacturer_repo.py
----------------------------------
Data access layer for manufacturers.
"""

from typing import Callable, Optional

import psycopg2

from db.connection import get_connection, release_connection
from exceptions import DataProcessingError
from models.manufacturer import Manufacturer
from utils.logger import get_logger

logger = get_logger(__name__)


class ManufacturerRepository:
    """Repository for CRUD operations on the manufacturers table."""

    def __init__(
        self,
        get_conn: Callable = get_connection,
        release_conn: Callable = release_connection,
    ):
        self._get_conn = get_conn
        self._release_conn = release_conn

    def create(self, manufacturer: Manufacturer) -> Manufacturer:
        """Insert a manufacturer and populate its `id`."""
        sql = "INSERT INTO manufacturers (name, country) VALUES (%s, %s) RETURNING id;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (manufacturer.name, manufacturer.country))
                manufacturer.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Created manufacturer '{manufacturer.name}' #{manufacturer.id}")
            return manufacturer
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to create manufacturer: {e}")
            raise DataProcessingError(
                f"Couldn't create manufacturer {manufacturer!r}", e
            ) from e
        finally:
            self._release_conn(conn)

    def get(self, manufacturer_id: int) -> Optional[Manufacturer]:
        """Fetch a live manufacturer by id, or None."""
        sql = """
            SELECT id, name, country FROM manufacturers
            WHERE id = %s AND is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (manufacturer_id,))
                row = cur.fetchone()
                return self._row_to_manufacturer(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to get manufacturer #{manufacturer_id}: {e}")
            raise DataProcessingError(
                f"Couldn't get manufacturer by id {manufacturer_id}", e
            ) from e
        finally:
            self._release_conn(conn)

    def get_all(self) -> list[Manufacturer]:
        """Get every live manufacturer."""
        sql = "SELECT id, name, country FROM manufacturers WHERE is_deleted = FALSE ORDER BY id;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_manufacturer(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to get all manufacturers: {e}")
            raise DataProcessingError("Couldn't get all manufacturers from DB", e) from e
        finally:
            self._release_conn(conn)

    def update(self, manufacturer: Manufacturer) -> Manufacturer:
        """Overwrite name and country of a live manufacturer."""
        sql = """
            UPDATE manufacturers SET name = %s, country = %s
            WHERE id = %s AND is_deleted = FALSE;
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (manufacturer.name, manufacturer.country, manufacturer.id))
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Updated manufacturer #{manufacturer.id}")
            else:
                logger.warning(
                    f"Manufacturer #{manufacturer.id} not updated: no live row with this id"
                )
            return manufacturer
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update manufacturer #{manufacturer.id}: {e}")
            raise DataProcessingError(
                f"Couldn't update manufacturer {manufacturer!r}", e
            ) from e
        finally:
            self._release_conn(conn)

    def delete(self, manufacturer_id: int) -> bool:
        """Soft-delete a manufacturer. Returns True if a row was flagged."""
        sql = "UPDATE manufacturers SET is_deleted = TRUE WHERE id = %s;"
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (manufacturer_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted manufacturer #{manufacturer_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete manufacturer #{manufacturer_id}: {e}")
            raise DataProcessingError(
                f"Couldn't delete manufacturer by id {manufacturer_id}", e
            ) from e
        finally:
            self._release_conn(conn)

    @staticmethod
    def _row_to_manufacturer(row: tuple) -> Manufacturer:
        return Manufacturer(id=row[0], name=row[1], country=row[2])
