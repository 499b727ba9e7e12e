import sys
import os

# Add project root to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from catalog.bootstrap import create_schema, ensure_fallback_cuisine
from catalog.db import SessionLocal, init_engine
from catalog.settings import settings


def init_db():
    print(f"Connecting to {settings.database_url}...")
    engine = init_engine(settings.database_url)
    create_schema(engine)

    session = SessionLocal()()
    try:
        cuisine = ensure_fallback_cuisine(session)
        print(f"Fallback cuisine: {cuisine.name} (id={cuisine.id})")
        print("Schema ready.")
    finally:
        session.close()


if __name__ == "__main__":
    init_db()
