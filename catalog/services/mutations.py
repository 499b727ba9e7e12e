"""Catalog mutations.

Each operation resolves the natural keys it needs, then writes inside a
`transaction` scope so a multi-statement sequence either lands completely or
not at all.

Updates addressed by recipe title do not check that the recipe exists; a
title matching nothing is reported as `affected=0`. Pass `strict=True` (or
set `strict_updates`) to raise NotFound instead.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from ..db import transaction
from ..errors import (
    AssociationNotFound,
    NotFound,
    Protected,
    StorageFailure,
    ValidationFailure,
    storage_errors,
)
from ..models import Cuisine, Ingredient, Recipe, RecipeIngredient, RecipeInstruction
from ..settings import settings
from .lookup import EntityKind, resolve

logger = logging.getLogger("catalog.mutations")


@dataclass(frozen=True)
class UpdateResult:
    affected: int


def _require(**fields) -> None:
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ValidationFailure(f"missing required field(s): {', '.join(missing)}")


def _checked(result: UpdateResult, strict: Optional[bool], entity: str, key: str) -> UpdateResult:
    if strict is None:
        strict = settings.strict_updates
    if strict and result.affected == 0:
        raise NotFound(entity, key)
    return result


# --- Creation ---

def create_cuisine(db: Session, name: str) -> Cuisine:
    """Insert a cuisine. A duplicate name surfaces as StorageFailure."""
    _require(name=name)

    cuisine = Cuisine(name=name)
    with storage_errors(), transaction(db):
        db.add(cuisine)
        db.flush()
        cuisine_id = cuisine.id

    logger.info(f"Created cuisine '{name}' (id={cuisine_id})")
    return cuisine


def create_ingredient(db: Session, name: str, quantity: float, unit: str) -> Ingredient:
    _require(name=name, quantity=quantity, unit=unit)

    ingredient = Ingredient(name=name, quantity=quantity, unit=unit)
    with storage_errors(), transaction(db):
        db.add(ingredient)
        db.flush()
        ingredient_id = ingredient.id

    logger.info(f"Created ingredient '{name}' ({quantity} {unit}, id={ingredient_id})")
    return ingredient


# --- Recipe <-> ingredient associations ---

def attach_ingredient(db: Session, title: str, ingredient_name: str) -> RecipeIngredient:
    """Link an ingredient to a recipe.

    Attaching the same pair twice creates two association rows.
    """
    _require(title=title, ingredient_name=ingredient_name)
    recipe = resolve(db, EntityKind.RECIPE, title)
    ingredient = resolve(db, EntityKind.INGREDIENT, ingredient_name)

    link = RecipeIngredient(recipe_id=recipe.id, ingredient_id=ingredient.id)
    with storage_errors(), transaction(db):
        db.add(link)
        db.flush()

    logger.info(f"Attached '{ingredient_name}' to '{title}'")
    return link


def detach_ingredient(db: Session, title: str, ingredient_name: str) -> int:
    """Remove every association row between the recipe and the ingredient.

    Returns the number of rows removed.

    Raises:
        NotFound: the recipe or the ingredient does not exist
        AssociationNotFound: both exist but are not linked
    """
    _require(title=title, ingredient_name=ingredient_name)
    recipe = resolve(db, EntityKind.RECIPE, title)
    ingredient = resolve(db, EntityKind.INGREDIENT, ingredient_name)

    with storage_errors(), transaction(db):
        result = db.execute(
            delete(RecipeIngredient).where(
                RecipeIngredient.recipe_id == recipe.id,
                RecipeIngredient.ingredient_id == ingredient.id,
            )
        )
        removed = result.rowcount

    if removed == 0:
        raise AssociationNotFound(title, ingredient_name)

    logger.info(f"Detached '{ingredient_name}' from '{title}' ({removed} rows)")
    return removed


# --- Recipe field updates ---

def rename_recipe(
    db: Session, old_title: str, new_title: str, *, strict: Optional[bool] = None
) -> UpdateResult:
    _require(old_title=old_title, new_title=new_title)

    with storage_errors(), transaction(db):
        result = db.execute(
            update(Recipe).where(Recipe.title == old_title).values(title=new_title)
        )
        outcome = UpdateResult(affected=result.rowcount)

    logger.info(f"Renamed recipe '{old_title}' -> '{new_title}' ({outcome.affected} rows)")
    return _checked(outcome, strict, EntityKind.RECIPE.value, old_title)


def retag_recipe_cuisine(
    db: Session, title: str, cuisine_name: str, *, strict: Optional[bool] = None
) -> UpdateResult:
    _require(title=title, cuisine_name=cuisine_name)
    cuisine = resolve(db, EntityKind.CUISINE, cuisine_name)

    with storage_errors(), transaction(db):
        result = db.execute(
            update(Recipe).where(Recipe.title == title).values(cuisine_id=cuisine.id)
        )
        outcome = UpdateResult(affected=result.rowcount)

    logger.info(f"Recipe '{title}' cuisine -> '{cuisine_name}' ({outcome.affected} rows)")
    return _checked(outcome, strict, EntityKind.RECIPE.value, title)


def retag_recipe_allergy(
    db: Session, title: str, allergy_name: str, *, strict: Optional[bool] = None
) -> UpdateResult:
    _require(title=title, allergy_name=allergy_name)
    allergy = resolve(db, EntityKind.ALLERGY, allergy_name)

    with storage_errors(), transaction(db):
        result = db.execute(
            update(Recipe).where(Recipe.title == title).values(allergy_id=allergy.id)
        )
        outcome = UpdateResult(affected=result.rowcount)

    logger.info(f"Recipe '{title}' allergy -> '{allergy_name}' ({outcome.affected} rows)")
    return _checked(outcome, strict, EntityKind.RECIPE.value, title)


def update_instruction(
    db: Session,
    title: str,
    step_number: int,
    description: str,
    *,
    strict: Optional[bool] = None,
) -> UpdateResult:
    """Rewrite the text of an existing step. Never inserts a new step."""
    _require(title=title, step_number=step_number, description=description)
    recipe = resolve(db, EntityKind.RECIPE, title)

    with storage_errors(), transaction(db):
        result = db.execute(
            update(RecipeInstruction)
            .where(
                RecipeInstruction.recipe_id == recipe.id,
                RecipeInstruction.step_number == step_number,
            )
            .values(description=description)
        )
        outcome = UpdateResult(affected=result.rowcount)

    logger.info(f"Recipe '{title}' step {step_number} updated ({outcome.affected} rows)")
    return _checked(outcome, strict, "instruction", f"{title}#{step_number}")


# --- Cuisine deletion ---

def _reassign_recipes(db: Session, cuisine_id: int, fallback_id: int) -> int:
    result = db.execute(
        update(Recipe).where(Recipe.cuisine_id == cuisine_id).values(cuisine_id=fallback_id)
    )
    return result.rowcount


def _drop_cuisine(db: Session, cuisine_id: int) -> None:
    db.execute(delete(Cuisine).where(Cuisine.id == cuisine_id))


def delete_cuisine(db: Session, name: str) -> int:
    """Delete a cuisine after moving its recipes to the fallback cuisine.

    Returns the number of recipes reassigned.

    Raises:
        NotFound: no cuisine has this name
        Protected: the cuisine is the fallback itself; nothing is written
    """
    _require(name=name)
    cuisine = resolve(db, EntityKind.CUISINE, name)
    fallback_id = settings.fallback_cuisine_id

    if cuisine.id == fallback_id:
        logger.warning(f"Refused to delete fallback cuisine '{name}'")
        raise Protected(f"cuisine '{name}' is the fallback cuisine and cannot be deleted")

    with storage_errors(), transaction(db):
        if db.get(Cuisine, fallback_id) is None:
            raise StorageFailure(
                f"fallback cuisine id {fallback_id} does not exist; run the bootstrap first"
            )
        moved = _reassign_recipes(db, cuisine.id, fallback_id)
        _drop_cuisine(db, cuisine.id)

    logger.info(f"Deleted cuisine '{name}', {moved} recipes moved to fallback")
    return moved
