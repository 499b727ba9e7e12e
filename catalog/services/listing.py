from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import storage_errors
from ..models import (
    AllergyInformation,
    Cuisine,
    DietaryInformation,
    Goal,
    Ingredient,
    Recipe,
)
from .lookup import EntityKind, resolve


def _all(db: Session, model) -> list:
    with storage_errors():
        return list(db.scalars(select(model).order_by(model.id)).all())


def list_recipes(db: Session) -> list[Recipe]:
    return _all(db, Recipe)


def list_cuisines(db: Session) -> list[Cuisine]:
    return _all(db, Cuisine)


def list_goals(db: Session) -> list[Goal]:
    return _all(db, Goal)


def list_allergies(db: Session) -> list[AllergyInformation]:
    return _all(db, AllergyInformation)


def list_dietary(db: Session) -> list[DietaryInformation]:
    return _all(db, DietaryInformation)


def list_ingredients(db: Session) -> list[Ingredient]:
    return _all(db, Ingredient)


def recipes_by_cuisine(db: Session, cuisine_name: str) -> list[Recipe]:
    """Recipes tagged with the named cuisine. NotFound if it does not exist."""
    cuisine = resolve(db, EntityKind.CUISINE, cuisine_name)
    with storage_errors():
        return list(db.scalars(
            select(Recipe).where(Recipe.cuisine_id == cuisine.id).order_by(Recipe.id)
        ).all())


def recipes_by_goal(db: Session, goal_name: str) -> list[Recipe]:
    goal = resolve(db, EntityKind.GOAL, goal_name)
    with storage_errors():
        return list(db.scalars(
            select(Recipe).where(Recipe.goal_id == goal.id).order_by(Recipe.id)
        ).all())


def recipes_without_allergen(db: Session) -> list[Recipe]:
    with storage_errors():
        return list(db.scalars(
            select(Recipe).where(Recipe.allergy_id.is_(None)).order_by(Recipe.id)
        ).all())
