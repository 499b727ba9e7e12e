"""Natural-key resolution.

Every mutation resolves names/titles to surrogate ids through `resolve`
before writing. Matching is an exact, bound-parameter comparison; whatever
case/collation rules the store applies by default are the rules.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFound, StorageFailure, storage_errors
from ..models import (
    AllergyInformation,
    Cuisine,
    DietaryInformation,
    Goal,
    Ingredient,
    Recipe,
)

logger = logging.getLogger("catalog.lookup")


class EntityKind(str, Enum):
    CUISINE = "cuisine"
    INGREDIENT = "ingredient"
    GOAL = "goal"
    ALLERGY = "allergy"
    DIETARY = "dietary"
    RECIPE = "recipe"


# kind -> (model, natural key column)
NATURAL_KEYS = {
    EntityKind.CUISINE: (Cuisine, Cuisine.name),
    EntityKind.INGREDIENT: (Ingredient, Ingredient.name),
    EntityKind.GOAL: (Goal, Goal.name),
    EntityKind.ALLERGY: (AllergyInformation, AllergyInformation.name),
    EntityKind.DIETARY: (DietaryInformation, DietaryInformation.name),
    EntityKind.RECIPE: (Recipe, Recipe.title),
}


@dataclass(frozen=True)
class Resolved:
    kind: EntityKind
    id: int
    row: Any


def resolve(db: Session, kind: EntityKind | str, key: str) -> Resolved:
    """Resolve `key` to the entity of `kind` it names.

    Ingredient names are not unique; the oldest matching row wins.

    Raises:
        NotFound: no row has this key
        StorageFailure: the lookup itself failed
    """
    kind = EntityKind(kind)
    model, column = NATURAL_KEYS[kind]

    with storage_errors():
        row = db.scalars(
            select(model).where(column == key).order_by(model.id).limit(1)
        ).first()

    if row is None:
        logger.info(f"No {kind.value} named '{key}'")
        raise NotFound(kind.value, key)

    return Resolved(kind=kind, id=row.id, row=row)


def ingredient_name(db: Session, ingredient_id: int) -> str:
    """Name of one ingredient by id; used by the aggregate fan-out."""
    with storage_errors():
        name = db.scalar(select(Ingredient.name).where(Ingredient.id == ingredient_id))
    if name is None:
        # Association row points at a vanished ingredient
        raise StorageFailure(f"ingredient id {ingredient_id} is referenced but missing")
    return name
