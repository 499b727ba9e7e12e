"""Error taxonomy for catalog operations.

Every operation either returns a success payload or raises a CatalogError.
The HTTP layer maps `status_code` and renders `to_payload()`:

- ValidationFailure: a required name/field is missing (never reaches storage)
- NotFound: no row for a natural key (AssociationNotFound for join rows)
- Protected: deletion of the fallback cuisine was requested
- StorageFailure: the store rejected or failed a statement
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("catalog.errors")


class CatalogError(Exception):
    kind = "CatalogError"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict:
        return {"kind": self.kind, "detail": self.detail}


class ValidationFailure(CatalogError):
    kind = "ValidationFailure"
    # Missing input shares the missing-entity status
    status_code = 404


class NotFound(CatalogError):
    kind = "NotFound"
    status_code = 404

    def __init__(self, entity: str, key: str, detail: str | None = None):
        self.entity = entity
        self.key = key
        super().__init__(detail or f"{entity} '{key}' does not exist")

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload.update(entity=self.entity, key=self.key)
        return payload


class AssociationNotFound(NotFound):
    def __init__(self, title: str, ingredient_name: str):
        super().__init__(
            "association",
            f"{title}/{ingredient_name}",
            detail=f"ingredient '{ingredient_name}' is not used in recipe '{title}'",
        )


class Protected(CatalogError):
    kind = "Protected"
    status_code = 409


class StorageFailure(CatalogError):
    kind = "StorageFailure"
    status_code = 500


@contextmanager
def storage_errors():
    """Re-raise any SQLAlchemy error as StorageFailure with the driver's text."""
    try:
        yield
    except SQLAlchemyError as e:
        orig = getattr(e, "orig", None)
        message = str(orig) if orig is not None else str(e)
        logger.error(f"Storage failure: {message}")
        raise StorageFailure(message) from e
