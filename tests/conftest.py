import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from catalog.main import app
from catalog.db import enable_sqlite_foreign_keys, get_db
from catalog.bootstrap import create_schema, ensure_fallback_cuisine
from catalog.models import (
    AllergyInformation,
    Cuisine,
    DietaryInformation,
    Goal,
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeInstruction,
)

# --- Test Database Setup ---


@pytest.fixture
def engine(tmp_path):
    # File-backed (not :memory:) so the ingredient lookup threads each get a connection
    engine = create_engine(
        f"sqlite:///{tmp_path / 'catalog.db'}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Direct database session for setup and service calls."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Test client with DB override."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db_session):
    """Seed a small catalog.

    Cuisines: Italian(1) French(2) Thai(3) Mexican(4) International(5, fallback)
    Recipes:
    - Mango Salad: Thai, no allergen, Mango + Lime, 2 steps (inserted out of order)
    - Plain Rice: Italian, no allergen, Rice + Water, 3 steps
    - Pad Thai: Thai, Nuts, Noodles + Peanuts + Lime, 1 step
    - Bare Pasta: Italian, Gluten, no ingredients, no steps
    """
    for cuisine_id, name in enumerate(["Italian", "French", "Thai", "Mexican"], start=1):
        db_session.add(Cuisine(id=cuisine_id, name=name))
    db_session.commit()
    ensure_fallback_cuisine(db_session)

    goals = {name: Goal(name=name) for name in ["Weight Loss", "Muscle Gain"]}
    diets = {name: DietaryInformation(name=name) for name in ["Vegan", "Vegetarian", "Omnivore"]}
    allergies = {name: AllergyInformation(name=name) for name in ["Nuts", "Gluten"]}
    ingredients = {
        name: Ingredient(name=name, quantity=qty, unit=unit)
        for name, qty, unit in [
            ("Mango", 1, "piece"),
            ("Lime", 0.5, "piece"),
            ("Rice", 200, "g"),
            ("Water", 400, "ml"),
            ("Salt", 1, "pinch"),
            ("Peanuts", 30, "g"),
            ("Noodles", 250, "g"),
        ]
    }
    db_session.add_all([*goals.values(), *diets.values(), *allergies.values(), *ingredients.values()])
    db_session.flush()

    def recipe(title, cuisine_id, goal, diet, allergy=None):
        r = Recipe(
            title=title,
            cuisine_id=cuisine_id,
            goal_id=goals[goal].id,
            dietary_id=diets[diet].id,
            allergy_id=allergies[allergy].id if allergy else None,
        )
        db_session.add(r)
        db_session.flush()
        return r

    mango_salad = recipe("Mango Salad", 3, "Weight Loss", "Vegan")
    plain_rice = recipe("Plain Rice", 1, "Weight Loss", "Vegan")
    pad_thai = recipe("Pad Thai", 3, "Muscle Gain", "Omnivore", allergy="Nuts")
    recipe("Bare Pasta", 1, "Muscle Gain", "Vegetarian", allergy="Gluten")

    links = [
        (mango_salad, "Mango"),
        (mango_salad, "Lime"),
        (plain_rice, "Rice"),
        (plain_rice, "Water"),
        (pad_thai, "Noodles"),
        (pad_thai, "Peanuts"),
        (pad_thai, "Lime"),
    ]
    for r, name in links:
        db_session.add(RecipeIngredient(recipe_id=r.id, ingredient_id=ingredients[name].id))

    steps = [
        (mango_salad, 2, "Dress with lime juice."),
        (mango_salad, 1, "Dice the mango."),
        (plain_rice, 1, "Rinse the rice."),
        (plain_rice, 2, "Boil in salted water."),
        (plain_rice, 3, "Rest for five minutes."),
        (pad_thai, 1, "Stir-fry everything."),
    ]
    for r, number, text in steps:
        db_session.add(RecipeInstruction(recipe_id=r.id, step_number=number, description=text))

    db_session.commit()
    return db_session
