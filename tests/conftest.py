"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import MagicMock

from models.car import Car
from models.driver import Driver
from models.manufacturer import Manufacturer


@pytest.fixture
def mock_cursor():
    """Mock psycopg2 cursor returned by `with conn.cursor() as cur`."""
    cur = MagicMock()
    cur.rowcount = 0
    cur.fetchone.return_value = None
    cur.fetchall.return_value = []
    return cur


@pytest.fixture
def mock_connection(mock_cursor):
    """Mock psycopg2 connection whose cursor context yields mock_cursor."""
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = mock_cursor
    conn.cursor.return_value.__exit__.return_value = False
    return conn


@pytest.fixture
def connection_provider(mock_connection):
    """Pair of (get_conn, release_conn) mocks handing out mock_connection."""
    get_conn = MagicMock(return_value=mock_connection)
    release_conn = MagicMock()
    return get_conn, release_conn


@pytest.fixture
def toyota() -> Manufacturer:
    return Manufacturer(id=1, name="Toyota", country="JP")


@pytest.fixture
def bob() -> Driver:
    return Driver(id=7, name="Bob", license_number="LIC-007")


@pytest.fixture
def alice() -> Driver:
    return Driver(id=8, name="Alice", license_number="LIC-008")


@pytest.fixture
def corolla(toyota, bob, alice) -> Car:
    """Unsaved car with two drivers attached."""
    return Car(model="Corolla", manufacturer=toyota, drivers=[bob, alice])
