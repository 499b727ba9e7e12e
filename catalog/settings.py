from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./recettes.db"

    # Reserved cuisine that absorbs recipes of a deleted cuisine
    fallback_cuisine_id: int = 5
    fallback_cuisine_name: str = "International"

    # Thread pool size for the per-ingredient name lookups
    ingredient_lookup_workers: int = 8

    # Promote updates that match zero rows to NotFound
    strict_updates: bool = False

    log_level: str = "INFO"
    rate_limit: str = "100/minute"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost",
        "http://127.0.0.1",
    ]


settings = Settings()
