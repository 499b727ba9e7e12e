"""Lookup-table API router.

Endpoints:
- GET /api/cuisines, /api/goals, /api/allergies, /api/dietary, /api/ingredients
- POST /api/cuisines/{name} - Create a cuisine
- DELETE /api/cuisines/{name} - Delete a cuisine (recipes move to the fallback)
- POST /api/ingredients - Create an ingredient
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    AllergyOut,
    CuisineOut,
    DietaryOut,
    GoalOut,
    IngredientCreate,
    IngredientOut,
    MessageOut,
)
from ..services import listing, mutations

router = APIRouter()


@router.get("/cuisines", response_model=list[CuisineOut])
def list_cuisines(db: Session = Depends(get_db)):
    return listing.list_cuisines(db)


@router.get("/goals", response_model=list[GoalOut])
def list_goals(db: Session = Depends(get_db)):
    return listing.list_goals(db)


@router.get("/allergies", response_model=list[AllergyOut])
def list_allergies(db: Session = Depends(get_db)):
    return listing.list_allergies(db)


@router.get("/dietary", response_model=list[DietaryOut])
def list_dietary(db: Session = Depends(get_db)):
    return listing.list_dietary(db)


@router.get("/ingredients", response_model=list[IngredientOut])
def list_ingredients(db: Session = Depends(get_db)):
    return listing.list_ingredients(db)


@router.post("/cuisines/{name}", response_model=MessageOut)
def create_cuisine(name: str, db: Session = Depends(get_db)):
    mutations.create_cuisine(db, name)
    return MessageOut(message=f"Cuisine '{name}' created.")


@router.delete("/cuisines/{name}", response_model=MessageOut)
def delete_cuisine(name: str, db: Session = Depends(get_db)):
    moved = mutations.delete_cuisine(db, name)
    return MessageOut(message=f"Cuisine '{name}' deleted.", affected=moved)


@router.post("/ingredients", response_model=MessageOut)
def create_ingredient(body: Optional[IngredientCreate] = None, db: Session = Depends(get_db)):
    # An absent body reaches the service check like an empty one
    body = body or IngredientCreate()
    mutations.create_ingredient(db, body.name, body.quantity, body.unit)
    return MessageOut(message=f"Ingredient '{body.name}' created.")
