"""Schema creation and reserved rows for a fresh store."""

import logging

from sqlalchemy.orm import Session

from .db import Base, transaction
from .errors import storage_errors
from .models import Cuisine
from .settings import settings

logger = logging.getLogger("catalog.bootstrap")


def create_schema(engine) -> None:
    Base.metadata.create_all(bind=engine)


def ensure_fallback_cuisine(db: Session) -> Cuisine:
    """Insert the fallback cuisine at its reserved id if it is missing."""
    with storage_errors():
        cuisine = db.get(Cuisine, settings.fallback_cuisine_id)
        if cuisine:
            return cuisine

        cuisine = Cuisine(id=settings.fallback_cuisine_id, name=settings.fallback_cuisine_name)
        with transaction(db):
            db.add(cuisine)

    logger.info(
        f"Created fallback cuisine '{settings.fallback_cuisine_name}' (id={settings.fallback_cuisine_id})"
    )
    return cuisine
