"""Full recipe view assembly.

A recipe aggregate joins the recipe with its cuisine, goal, diet and
(optional) allergy names, then adds the ingredient names and the ordered
instruction steps. Ingredient names are looked up concurrently, one session
per lookup, and the first failing lookup aborts the whole aggregate.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Hashable, Iterable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ..errors import StorageFailure, storage_errors
from ..models import (
    AllergyInformation,
    Cuisine,
    DietaryInformation,
    Goal,
    Recipe,
    RecipeIngredient,
    RecipeInstruction,
)
from ..schemas import InstructionOut, RecipeAggregateOut, RecipeDetailOut
from ..settings import settings
from .lookup import EntityKind, ingredient_name, resolve

logger = logging.getLogger("catalog.aggregate")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def gather_fail_fast(
    fn: Callable[[K], V],
    keys: Iterable[K],
    max_workers: int,
) -> dict[K, V]:
    """Run `fn` for every key on a thread pool and collect the results.

    Returns once every call has finished. If any call raises, calls that have
    not started yet are cancelled and the first exception is re-raised.
    """
    keys = list(dict.fromkeys(keys))
    if not keys:
        return {}

    with ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(keys))),
        thread_name_prefix="catalog-lookup",
    ) as pool:
        futures = {pool.submit(fn, key): key for key in keys}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in pending:
            future.cancel()

        for future in done:
            error = future.exception()
            if error is not None:
                raise error

        return {futures[future]: future.result() for future in done}


def _load_recipe_row(db: Session, recipe_id: int) -> RecipeDetailOut:
    stmt = (
        select(
            Recipe,
            Cuisine.name,
            Goal.name,
            DietaryInformation.name,
            AllergyInformation.name,
        )
        .join(Cuisine, Recipe.cuisine_id == Cuisine.id)
        .join(Goal, Recipe.goal_id == Goal.id)
        .join(DietaryInformation, Recipe.dietary_id == DietaryInformation.id)
        .outerjoin(AllergyInformation, Recipe.allergy_id == AllergyInformation.id)
        .where(Recipe.id == recipe_id)
    )
    with storage_errors():
        row = db.execute(stmt).first()

    if row is None:
        # Resolved a moment ago, so one of the required references is dangling
        raise StorageFailure(
            f"recipe id {recipe_id} references a missing cuisine, goal or diet"
        )

    recipe, cuisine_name, goal_name, dietary_name, allergy_name = row
    return RecipeDetailOut(
        id=recipe.id,
        title=recipe.title,
        cuisine_id=recipe.cuisine_id,
        goal_id=recipe.goal_id,
        dietary_id=recipe.dietary_id,
        allergy_id=recipe.allergy_id,
        cuisine_name=cuisine_name,
        goal_name=goal_name,
        dietary_name=dietary_name,
        allergy_name=allergy_name,
    )


def _load_ingredient_names(
    db: Session,
    recipe_id: int,
    session_factory: sessionmaker,
    max_workers: int,
) -> list[str]:
    with storage_errors():
        ingredient_ids = db.scalars(
            select(RecipeIngredient.ingredient_id)
            .where(RecipeIngredient.recipe_id == recipe_id)
            .order_by(RecipeIngredient.id)
        ).all()

    def lookup(ingredient_id: int) -> str:
        with session_factory() as session:
            return ingredient_name(session, ingredient_id)

    names = gather_fail_fast(lookup, ingredient_ids, max_workers)
    # One entry per association row, duplicates included
    return [names[i] for i in ingredient_ids]


def _load_instructions(db: Session, recipe_id: int) -> list[InstructionOut]:
    with storage_errors():
        steps = db.scalars(
            select(RecipeInstruction)
            .where(RecipeInstruction.recipe_id == recipe_id)
            .order_by(RecipeInstruction.step_number)
        ).all()
    return [InstructionOut.model_validate(step) for step in steps]


def assemble_full(
    db: Session,
    title: str,
    *,
    session_factory: Optional[sessionmaker] = None,
    max_workers: Optional[int] = None,
) -> RecipeAggregateOut:
    """Assemble the full view of the recipe titled `title`.

    Args:
        db: Database session for the recipe, join and instruction reads
        title: Recipe title (natural key)
        session_factory: Session factory for the concurrent ingredient
            lookups. Defaults to one bound to the same engine as `db`.
        max_workers: Upper bound on concurrent ingredient lookups

    Raises:
        NotFound: no recipe has this title
        StorageFailure: any read failed, including a single ingredient lookup
    """
    recipe = resolve(db, EntityKind.RECIPE, title)

    if session_factory is None:
        session_factory = sessionmaker(bind=db.get_bind(), autoflush=False)
    if max_workers is None:
        max_workers = settings.ingredient_lookup_workers

    detail = _load_recipe_row(db, recipe.id)
    ingredients = _load_ingredient_names(db, recipe.id, session_factory, max_workers)
    instructions = _load_instructions(db, recipe.id)

    logger.debug(
        f"Assembled '{title}': {len(ingredients)} ingredients, {len(instructions)} steps"
    )
    return RecipeAggregateOut(
        recipe=detail,
        ingredients=ingredients,
        instructions=instructions,
    )
