"""FastAPI dependencies for recipekit.

Provides:
- Settings
- The process-wide conversion registry (standard table + configured house rules)
"""

import logging
from functools import lru_cache

from .services.unit_conversion import ConversionRegistry, ConversionRulePriority
from .settings import Settings, settings

logger = logging.getLogger("recipekit.api")


def get_settings() -> Settings:
    return settings


def build_registry(config: Settings) -> ConversionRegistry:
    registry = ConversionRegistry.standard()
    if config.house_rules:
        logger.info(f"Loading {len(config.house_rules)} house conversion rules")
        registry = registry.with_rules(config.house_rules, ConversionRulePriority.HOUSE)
    return registry


@lru_cache(maxsize=1)
def get_registry() -> ConversionRegistry:
    """Built once, then only read; safe to share across requests."""
    return build_registry(settings)
