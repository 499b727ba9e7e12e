"""Pydantic schemas for the recipe catalog.

Request/response models for:
- Lookup tags (cuisines, goals, dietary, allergies)
- Ingredients
- Recipes and the full recipe aggregate
- Mutation confirmations and error payloads
"""

from typing import Optional

from pydantic import BaseModel


# --- Lookup tags ---

class TagOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CuisineOut(TagOut):
    pass


class GoalOut(TagOut):
    pass


class DietaryOut(TagOut):
    pass


class AllergyOut(TagOut):
    pass


# --- Ingredient ---

class IngredientOut(BaseModel):
    id: int
    name: str
    quantity: float
    unit: str

    class Config:
        from_attributes = True


class IngredientCreate(BaseModel):
    # Presence is checked by the service so missing fields report as ValidationFailure
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None


# --- Recipe ---

class RecipeOut(BaseModel):
    id: int
    title: str
    cuisine_id: int
    goal_id: int
    dietary_id: int
    allergy_id: Optional[int] = None

    class Config:
        from_attributes = True


class RecipeDetailOut(RecipeOut):
    """Recipe attributes with the joined display names."""
    cuisine_name: str
    goal_name: str
    dietary_name: str
    allergy_name: Optional[str] = None


class InstructionOut(BaseModel):
    step_number: int
    description: str

    class Config:
        from_attributes = True


class RecipeAggregateOut(BaseModel):
    recipe: RecipeDetailOut
    ingredients: list[str]
    instructions: list[InstructionOut]


# --- Mutation requests ---

class RecipeRename(BaseModel):
    new_title: Optional[str] = None


class RecipeCuisinePatch(BaseModel):
    cuisine: Optional[str] = None


class RecipeAllergyPatch(BaseModel):
    allergy: Optional[str] = None


class InstructionPatch(BaseModel):
    description: Optional[str] = None


# --- Responses ---

class MessageOut(BaseModel):
    message: str
    affected: Optional[int] = None


class ErrorOut(BaseModel):
    kind: str
    detail: str
