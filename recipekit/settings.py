from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.unit_conversion import ConversionRule


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="RECIPEKIT_", extra="ignore")

    app_name: str = "recipekit"
    log_level: str = "INFO"

    # Batch conversions: True -> one unsupported ingredient fails the request,
    # False -> it is left in its original unit
    strict_conversion: bool = True

    # User overrides, loaded at HOUSE priority. JSON list in the env, e.g.
    # RECIPEKIT_HOUSE_RULES='[{"from_unit": "cup", "to_unit": "gram", "factor": 120, "ingredient_name": "flour"}]'
    house_rules: List[ConversionRule] = []

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


settings = Settings()
