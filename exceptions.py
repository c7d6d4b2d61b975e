"""
exceptions.py
-------------
Errors raised by the data access and service layers.
"""

from typing import Optional


class DataProcessingError(Exception):
    """
    Raised when a persistence operation fails.

    Wraps the underlying psycopg2 error (constraint violation, lost
    connection, bad statement) and describes which operation failed
    on which entity.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class EntityNotFoundError(Exception):
    """Raised by services when a lookup by id finds no live row."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")
