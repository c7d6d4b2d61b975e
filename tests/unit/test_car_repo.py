"""Unit tests for CarRepository."""

import pytest
import psycopg2

from exceptions import DataProcessingError
from models.car import Car
from models.driver import Driver
from repositories.car_repo import CarRepository


@pytest.fixture
def car_repo(connection_provider):
    """Create CarRepository bound to the mocked connection provider."""
    get_conn, release_conn = connection_provider
    return CarRepository(get_conn=get_conn, release_conn=release_conn)


def _sql(call) -> str:
    """Collapse whitespace of the SQL passed to a cursor call."""
    return " ".join(call.args[0].split())


class TestCreate:
    """Tests for CarRepository.create."""

    def test_create_assigns_generated_id(self, car_repo, mock_cursor, corolla):
        """Test create stores the id returned by the insert."""
        mock_cursor.fetchone.return_value = (42,)

        result = car_repo.create(corolla)

        assert result is corolla
        assert corolla.id == 42
        insert_call = mock_cursor.execute.call_args_list[0]
        assert _sql(insert_call).startswith("INSERT INTO cars (model, manufacturer_id)")
        assert "RETURNING id" in _sql(insert_call)
        assert insert_call.args[1] == ("Corolla", 1)

    def test_create_inserts_one_association_per_driver(self, car_repo, mock_cursor, corolla):
        """Test create writes a cars_drivers row for every attached driver."""
        mock_cursor.fetchone.return_value = (42,)

        car_repo.create(corolla)

        mock_cursor.executemany.assert_called_once()
        sql, rows = mock_cursor.executemany.call_args.args
        assert "INSERT INTO cars_drivers" in sql
        assert rows == [(42, 7), (42, 8)]

    def test_create_without_drivers_skips_association_insert(
        self, car_repo, mock_cursor, toyota
    ):
        """Test create with an empty driver list writes only the car row."""
        mock_cursor.fetchone.return_value = (3,)

        car_repo.create(Car(model="Yaris", manufacturer=toyota))

        mock_cursor.executemany.assert_not_called()

    def test_create_ignores_duplicate_drivers(self, car_repo, mock_cursor, toyota, bob):
        """Test the same driver attached twice yields a single association row."""
        mock_cursor.fetchone.return_value = (5,)

        car_repo.create(Car(model="Prius", manufacturer=toyota, drivers=[bob, bob]))

        _, rows = mock_cursor.executemany.call_args.args
        assert rows == [(5, 7)]

    def test_create_commits_once_and_releases(
        self, car_repo, mock_connection, mock_cursor, connection_provider, corolla
    ):
        """Test create commits a single transaction and returns the connection."""
        _, release_conn = connection_provider
        mock_cursor.fetchone.return_value = (42,)

        car_repo.create(corolla)

        mock_connection.commit.assert_called_once()
        mock_connection.rollback.assert_not_called()
        release_conn.assert_called_once_with(mock_connection)

    def test_create_rolls_back_when_association_insert_fails(
        self, car_repo, mock_connection, mock_cursor, connection_provider, corolla
    ):
        """Test a failing association insert rolls back the car insert too."""
        _, release_conn = connection_provider
        mock_cursor.fetchone.return_value = (42,)
        cause = psycopg2.Error("insert or update violates foreign key constraint")
        mock_cursor.executemany.side_effect = cause

        with pytest.raises(DataProcessingError) as exc_info:
            car_repo.create(corolla)

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert "Couldn't insert car" in str(exc_info.value)
        assert corolla.id is None
        mock_connection.rollback.assert_called_once()
        mock_connection.commit.assert_not_called()
        release_conn.assert_called_once_with(mock_connection)


class TestRead:
    """Tests for CarRepository.get, get_all and get_all_by_driver."""

    def test_get_returns_aggregate(self, car_repo, mock_cursor):
        """Test get rebuilds the car, its manufacturer and its drivers."""
        mock_cursor.fetchone.return_value = (5, "Corolla", 1, "Toyota", "JP")
        mock_cursor.fetchall.return_value = [(7, "Bob", "LIC-007")]

        car = car_repo.get(5)

        assert car.id == 5
        assert car.model == "Corolla"
        assert car.manufacturer.id == 1
        assert car.manufacturer.name == "Toyota"
        assert car.manufacturer.country == "JP"
        assert car.drivers == [Driver(id=7, name="Bob", license_number="LIC-007")]

    def test_get_filters_deleted_rows(self, car_repo, mock_cursor):
        """Test both the car and driver queries exclude soft-deleted rows."""
        mock_cursor.fetchone.return_value = (5, "Corolla", 1, "Toyota", "JP")

        car_repo.get(5)

        car_call, drivers_call = mock_cursor.execute.call_args_list
        assert "c.is_deleted = FALSE" in _sql(car_call)
        assert car_call.args[1] == (5,)
        assert "d.is_deleted = FALSE" in _sql(drivers_call)
        assert "cd.car_id = %s" in _sql(drivers_call)
        assert drivers_call.args[1] == (5,)

    def test_get_missing_returns_none(self, car_repo, mock_cursor, connection_provider):
        """Test get returns None and skips the driver query when no row matches."""
        _, release_conn = connection_provider
        mock_cursor.fetchone.return_value = None

        assert car_repo.get(99) is None
        assert mock_cursor.execute.call_count == 1
        release_conn.assert_called_once()

    def test_get_returns_new_instances(self, car_repo, mock_cursor):
        """Test two reads of the same id give equal but distinct objects."""
        mock_cursor.fetchone.return_value = (5, "Corolla", 1, "Toyota", "JP")

        first = car_repo.get(5)
        second = car_repo.get(5)

        assert first == second
        assert first is not second

    def test_get_all_loads_drivers_per_car(self, car_repo, mock_cursor):
        """Test get_all issues one driver query per car."""
        mock_cursor.fetchall.side_effect = [
            [(1, "Corolla", 1, "Toyota", "JP"), (2, "Civic", 2, "Honda", "JP")],
            [(7, "Bob", "LIC-007")],
            [],
        ]

        cars = car_repo.get_all()

        assert [c.id for c in cars] == [1, 2]
        assert [d.id for d in cars[0].drivers] == [7]
        assert cars[1].drivers == []
        assert mock_cursor.execute.call_count == 3
        assert "c.is_deleted = FALSE" in _sql(mock_cursor.execute.call_args_list[0])

    def test_get_all_by_driver_joins_association(self, car_repo, mock_cursor):
        """Test get_all_by_driver filters on the association table and live cars."""
        mock_cursor.fetchall.side_effect = [
            [(1, "Corolla", 1, "Toyota", "JP")],
            [(7, "Bob", "LIC-007"), (8, "Alice", "LIC-008")],
        ]

        cars = car_repo.get_all_by_driver(7)

        first_call = mock_cursor.execute.call_args_list[0]
        assert "JOIN cars_drivers cd ON c.id = cd.car_id" in _sql(first_call)
        assert "cd.driver_id = %s AND c.is_deleted = FALSE" in _sql(first_call)
        assert first_call.args[1] == (7,)
        assert [d.id for d in cars[0].drivers] == [7, 8]

    def test_read_failure_is_wrapped(self, car_repo, mock_cursor, connection_provider):
        """Test store errors on reads surface as DataProcessingError."""
        _, release_conn = connection_provider
        mock_cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")

        with pytest.raises(DataProcessingError, match="Couldn't get all cars"):
            car_repo.get_all()

        release_conn.assert_called_once()


class TestUpdate:
    """Tests for CarRepository.update."""

    def test_update_replaces_associations(self, car_repo, mock_connection, mock_cursor, corolla):
        """Test update rewrites scalars, then deletes and reinserts association rows."""
        corolla.id = 42
        mock_cursor.rowcount = 1

        result = car_repo.update(corolla)

        assert result is corolla
        update_call, delete_call = mock_cursor.execute.call_args_list
        assert _sql(update_call).startswith("UPDATE cars SET model = %s, manufacturer_id = %s")
        assert "is_deleted = FALSE" in _sql(update_call)
        assert update_call.args[1] == ("Corolla", 1, 42)
        assert _sql(delete_call) == "DELETE FROM cars_drivers WHERE car_id = %s;"
        assert delete_call.args[1] == (42,)
        _, rows = mock_cursor.executemany.call_args.args
        assert rows == [(42, 7), (42, 8)]
        mock_connection.commit.assert_called_once()

    def test_update_with_empty_drivers_clears_associations(
        self, car_repo, mock_cursor, toyota
    ):
        """Test update with no drivers only deletes the old association rows."""
        mock_cursor.rowcount = 1

        car_repo.update(Car(id=42, model="Corolla", manufacturer=toyota))

        assert mock_cursor.execute.call_count == 2
        mock_cursor.executemany.assert_not_called()

    def test_update_of_deleted_car_leaves_associations(
        self, car_repo, mock_connection, mock_cursor, corolla
    ):
        """Test associations are untouched when no live car matches the id."""
        corolla.id = 42
        mock_cursor.rowcount = 0

        car_repo.update(corolla)

        assert mock_cursor.execute.call_count == 1
        mock_cursor.executemany.assert_not_called()
        mock_connection.commit.assert_called_once()

    def test_update_rolls_back_on_failure(
        self, car_repo, mock_connection, mock_cursor, connection_provider, corolla
    ):
        """Test a failing association rewrite rolls back the scalar update."""
        _, release_conn = connection_provider
        corolla.id = 42
        mock_cursor.rowcount = 1
        mock_cursor.executemany.side_effect = psycopg2.Error("duplicate key value")

        with pytest.raises(DataProcessingError, match="Couldn't update car"):
            car_repo.update(corolla)

        mock_connection.rollback.assert_called_once()
        mock_connection.commit.assert_not_called()
        release_conn.assert_called_once_with(mock_connection)


class TestDriverAssignment:
    """Tests for CarRepository.add_driver and remove_driver."""

    def test_add_driver(self, car_repo, mock_connection, mock_cursor):
        """Test add_driver inserts the pair only for a live car and a live driver."""
        mock_cursor.rowcount = 1

        assert car_repo.add_driver(3, 7) is True
        call = mock_cursor.execute.call_args
        assert "ON CONFLICT (car_id, driver_id) DO NOTHING" in _sql(call)
        assert "FROM cars WHERE id = %s AND is_deleted = FALSE" in _sql(call)
        assert "FROM drivers WHERE id = %s AND is_deleted = FALSE" in _sql(call)
        assert call.args[1] == (3, 7, 3, 7)
        mock_connection.commit.assert_called_once()

    def test_add_existing_driver_is_noop(self, car_repo, mock_cursor):
        """Test add_driver reports False when nothing was inserted."""
        mock_cursor.rowcount = 0

        assert car_repo.add_driver(3, 7) is False

    def test_remove_driver(self, car_repo, mock_cursor):
        """Test remove_driver deletes a single association row."""
        mock_cursor.rowcount = 1

        assert car_repo.remove_driver(3, 7) is True
        call = mock_cursor.execute.call_args
        assert _sql(call) == "DELETE FROM cars_drivers WHERE car_id = %s AND driver_id = %s;"
        assert call.args[1] == (3, 7)

    def test_remove_driver_failure_is_wrapped(self, car_repo, mock_connection, mock_cursor):
        """Test errors while unassigning roll back and raise DataProcessingError."""
        mock_cursor.execute.side_effect = psycopg2.Error("boom")

        with pytest.raises(DataProcessingError):
            car_repo.remove_driver(3, 7)

        mock_connection.rollback.assert_called_once()


class TestDelete:
    """Tests for CarRepository.delete."""

    def test_delete_flags_row(self, car_repo, mock_connection, mock_cursor):
        """Test delete soft-deletes and reports success for one affected row."""
        mock_cursor.rowcount = 1

        assert car_repo.delete(5) is True
        call = mock_cursor.execute.call_args
        assert _sql(call) == "UPDATE cars SET is_deleted = TRUE WHERE id = %s;"
        assert call.args[1] == (5,)
        mock_connection.commit.assert_called_once()

    def test_delete_missing_returns_false(self, car_repo, mock_cursor):
        """Test delete reports False when no row has the id."""
        mock_cursor.rowcount = 0

        assert car_repo.delete(99) is False

    def test_delete_never_touches_associations(self, car_repo, mock_cursor):
        """Test soft delete issues a single statement on the cars table."""
        mock_cursor.rowcount = 1

        car_repo.delete(5)

        assert mock_cursor.execute.call_count == 1
        mock_cursor.executemany.assert_not_called()

    def test_delete_failure_is_wrapped(self, car_repo, mock_connection, mock_cursor):
        """Test delete errors are wrapped with the car id in the message."""
        mock_cursor.execute.side_effect = psycopg2.Error("boom")

        with pytest.raises(DataProcessingError, match="Couldn't delete car by id 5"):
            car_repo.delete(5)

        mock_connection.rollback.assert_called_once()
