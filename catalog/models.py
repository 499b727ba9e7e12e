"""SQLAlchemy ORM models for the recipe catalog.

Tables:
- Cuisines, Goals, DietaryInformation, AllergyInformation: name-keyed lookup tags
- Ingredients: name/quantity/unit (names are not unique)
- Recipes: title-keyed, references one cuisine, goal, diet and optionally one allergy
- RecipeIngredients: recipe <-> ingredient association rows (duplicates allowed)
- RecipeInstructions: numbered steps, unique per (recipe_id, step_number)
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import (
    String,
    Text,
    Integer,
    Float,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class Cuisine(Base):
    __tablename__ = "Cuisines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Goal(Base):
    __tablename__ = "Goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class DietaryInformation(Base):
    __tablename__ = "DietaryInformation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class AllergyInformation(Base):
    __tablename__ = "AllergyInformation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Ingredient(Base):
    __tablename__ = "Ingredients"
    __table_args__ = (
        Index("ix_ingredients_name", "name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)


class Recipe(Base):
    """Pre-seeded recipe; mutated only through targeted field updates."""
    __tablename__ = "Recipes"
    __table_args__ = (
        Index("ix_recipes_cuisine_id", "cuisine_id"),
        Index("ix_recipes_goal_id", "goal_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)

    cuisine_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Cuisines.id"), nullable=False
    )
    goal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Goals.id"), nullable=False
    )
    dietary_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("DietaryInformation.id"), nullable=False
    )
    # No allergens declared when NULL
    allergy_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("AllergyInformation.id"), nullable=True
    )


class RecipeIngredient(Base):
    """Association row; owned by neither the recipe nor the ingredient."""
    __tablename__ = "RecipeIngredients"
    __table_args__ = (
        Index("ix_recipe_ingredients_recipe_id", "recipe_id"),
    )

    # Surrogate key so the same pair can be attached twice
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Recipes.id"), nullable=False
    )
    ingredient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Ingredients.id"), nullable=False
    )


class RecipeInstruction(Base):
    """Numbered step of a recipe."""
    __tablename__ = "RecipeInstructions"
    __table_args__ = (
        UniqueConstraint("recipe_id", "step_number", name="uq_recipe_instruction_step"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Recipes.id"), nullable=False
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
