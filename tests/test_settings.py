from recipekit.deps import build_registry
from recipekit.quantity import ExactQuantity
from recipekit.services.unit_conversion import ConversionRulePriority
from recipekit.settings import Settings
from recipekit.units import Unit


def test_defaults(monkeypatch):
    monkeypatch.delenv("RECIPEKIT_STRICT_CONVERSION", raising=False)
    monkeypatch.delenv("RECIPEKIT_HOUSE_RULES", raising=False)
    config = Settings(_env_file=None)

    assert config.strict_conversion is True
    assert config.house_rules == []
    assert build_registry(config).rule_count() == 42


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RECIPEKIT_STRICT_CONVERSION", "false")
    monkeypatch.setenv("RECIPEKIT_LOG_LEVEL", "debug")
    config = Settings(_env_file=None)

    assert config.strict_conversion is False
    assert config.log_level == "debug"


def test_house_rules_from_env(monkeypatch):
    monkeypatch.setenv(
        "RECIPEKIT_HOUSE_RULES",
        '[{"from_unit": "cup", "to_unit": "gram", "factor": 125, "ingredient_name": "flour"}]',
    )
    config = Settings(_env_file=None)
    registry = build_registry(config)

    assert registry.rule_count(ConversionRulePriority.HOUSE) == 1
    converted = registry.convert(ExactQuantity(amount=2, unit=Unit.CUP), Unit.GRAM, "flour")
    assert converted.to_decimal() == 250
