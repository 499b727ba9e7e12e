"""Recipe API router.

Endpoints:
- GET /api/recipes - List recipes
- GET /api/recipes/allergen-free - Recipes without a declared allergen
- GET /api/recipes/by-cuisine/{cuisine_name} - Recipes of one cuisine
- GET /api/recipes/by-goal/{goal_name} - Recipes sharing a goal
- GET /api/recipes/{title}/full - Full recipe aggregate
- PUT/DELETE /api/recipes/{title}/ingredients/{ingredient_name} - Link/unlink an ingredient
- PUT /api/recipes/{title}/title|cuisine|allergy - Field updates
- PUT /api/recipes/{title}/steps/{step_number} - Rewrite one step

Errors are raised as CatalogError and rendered by the app-level handler.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    InstructionPatch,
    MessageOut,
    RecipeAggregateOut,
    RecipeAllergyPatch,
    RecipeCuisinePatch,
    RecipeOut,
    RecipeRename,
)
from ..services import listing, mutations
from ..services.aggregate import assemble_full

router = APIRouter()


@router.get("/recipes", response_model=list[RecipeOut])
def list_recipes(db: Session = Depends(get_db)):
    return listing.list_recipes(db)


@router.get("/recipes/allergen-free", response_model=list[RecipeOut])
def list_allergen_free_recipes(db: Session = Depends(get_db)):
    return listing.recipes_without_allergen(db)


@router.get("/recipes/by-cuisine/{cuisine_name}", response_model=list[RecipeOut])
def list_recipes_by_cuisine(cuisine_name: str, db: Session = Depends(get_db)):
    return listing.recipes_by_cuisine(db, cuisine_name)


@router.get("/recipes/by-goal/{goal_name}", response_model=list[RecipeOut])
def list_recipes_by_goal(goal_name: str, db: Session = Depends(get_db)):
    return listing.recipes_by_goal(db, goal_name)


@router.get("/recipes/{title}/full", response_model=RecipeAggregateOut)
def get_recipe_full(title: str, db: Session = Depends(get_db)):
    """Recipe with joined tag names, ingredient names and ordered steps."""
    return assemble_full(db, title)


@router.put("/recipes/{title}/ingredients/{ingredient_name}", response_model=MessageOut)
def attach_ingredient(title: str, ingredient_name: str, db: Session = Depends(get_db)):
    mutations.attach_ingredient(db, title, ingredient_name)
    return MessageOut(message=f"Ingredient '{ingredient_name}' added to '{title}'.")


@router.delete("/recipes/{title}/ingredients/{ingredient_name}", response_model=MessageOut)
def detach_ingredient(title: str, ingredient_name: str, db: Session = Depends(get_db)):
    removed = mutations.detach_ingredient(db, title, ingredient_name)
    return MessageOut(
        message=f"Ingredient '{ingredient_name}' removed from '{title}'.",
        affected=removed,
    )


@router.put("/recipes/{title}/title", response_model=MessageOut)
def rename_recipe(title: str, body: Optional[RecipeRename] = None, db: Session = Depends(get_db)):
    body = body or RecipeRename()
    result = mutations.rename_recipe(db, title, body.new_title)
    return MessageOut(message="Recipe title updated.", affected=result.affected)


@router.put("/recipes/{title}/cuisine", response_model=MessageOut)
def retag_recipe_cuisine(
    title: str, body: Optional[RecipeCuisinePatch] = None, db: Session = Depends(get_db)
):
    body = body or RecipeCuisinePatch()
    result = mutations.retag_recipe_cuisine(db, title, body.cuisine)
    return MessageOut(message="Recipe cuisine updated.", affected=result.affected)


@router.put("/recipes/{title}/allergy", response_model=MessageOut)
def retag_recipe_allergy(
    title: str, body: Optional[RecipeAllergyPatch] = None, db: Session = Depends(get_db)
):
    body = body or RecipeAllergyPatch()
    result = mutations.retag_recipe_allergy(db, title, body.allergy)
    return MessageOut(message="Recipe allergy updated.", affected=result.affected)


@router.put("/recipes/{title}/steps/{step_number}", response_model=MessageOut)
def update_instruction(
    title: str,
    step_number: int,
    body: Optional[InstructionPatch] = None,
    db: Session = Depends(get_db),
):
    body = body or InstructionPatch()
    result = mutations.update_instruction(db, title, step_number, body.description)
    return MessageOut(message=f"Step {step_number} updated.", affected=result.affected)
