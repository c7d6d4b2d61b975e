"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

import psycopg2

from db.connection import pooled_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Manufacturers table: car makers referenced by cars
CREATE TABLE IF NOT EXISTS manufacturers (
    id              BIGSERIAL PRIMARY KEY,
    name            VARCHAR(255) NOT NULL,
    country         VARCHAR(255),
    is_deleted      BOOLEAN NOT NULL DEFAULT FALSE
);

-- Drivers table: people who can be assigned to cars
CREATE TABLE IF NOT EXISTS drivers (
    id              BIGSERIAL PRIMARY KEY,
    name            VARCHAR(255) NOT NULL,
    license_number  VARCHAR(255) UNIQUE NOT NULL,
    is_deleted      BOOLEAN NOT NULL DEFAULT FALSE
);

-- Cars table: every car belongs to exactly one manufacturer
CREATE TABLE IF NOT EXISTS cars (
    id              BIGSERIAL PRIMARY KEY,
    model           VARCHAR(255) NOT NULL,
    manufacturer_id BIGINT NOT NULL REFERENCES manufacturers(id),
    is_deleted      BOOLEAN NOT NULL DEFAULT FALSE
);

-- Association table: a row means the driver is currently assigned to the car
CREATE TABLE IF NOT EXISTS cars_drivers (
    car_id          BIGINT NOT NULL REFERENCES cars(id),
    driver_id       BIGINT NOT NULL REFERENCES drivers(id),
    PRIMARY KEY (car_id, driver_id)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_cars_manufacturer ON cars(manufacturer_id) WHERE is_deleted = FALSE;
CREATE INDEX IF NOT EXISTS idx_cars_drivers_driver ON cars_drivers(driver_id);
"""

DROP_SQL = """
DROP TABLE IF EXISTS cars_drivers;
DROP TABLE IF EXISTS cars;
DROP TABLE IF EXISTS drivers;
DROP TABLE IF EXISTS manufacturers;
"""


def _execute_script(sql: str, action: str) -> None:
    with pooled_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
            conn.commit()
            logger.info(f"Database schema {action} finished successfully.")
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to {action} schema: {e}")
            raise


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    _execute_script(SCHEMA_SQL, "initialize")


def drop_tables() -> None:
    """Drop every table of the schema. Used to reset test databases."""
    _execute_script(DROP_SQL, "drop")


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
