"""
Router for unit lookup and conversion.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.errors import UnsupportedConversion
from ..deps import get_registry
from ..quantity import ExactQuantity
from ..schemas import UnitConvertRequest, UnitConvertResponse, UnitOut
from ..services.unit_conversion import ConversionRegistry, ConversionRulePriority
from ..units import Unit, aliases_for, resolve_unit

router = APIRouter()


def require_unit(text: str) -> Unit:
    unit = resolve_unit(text)
    if unit is None:
        raise HTTPException(status_code=400, detail=f"Unknown unit '{text}'")
    return unit


@router.get("/resolve", response_model=UnitOut)
def resolve(text: str = Query(..., min_length=1)):
    unit = resolve_unit(text)
    if unit is None:
        raise HTTPException(status_code=404, detail=f"Unknown unit '{text}'")
    return UnitOut(
        unit=unit,
        system=unit.system,
        dimension=unit.dimension,
        abbreviation=unit.abbreviation,
        plural_abbreviation=unit.plural_abbreviation,
        aliases=aliases_for(unit),
    )


@router.post("/convert", response_model=UnitConvertResponse)
def convert_units(req: UnitConvertRequest, registry: ConversionRegistry = Depends(get_registry)):
    """
    Convert a quantity from one unit to another.
    """
    from_unit = require_unit(req.from_unit)
    registry = registry.with_rules(req.recipe_rules, ConversionRulePriority.RECIPE)

    # 1. Resolve target unit: explicit unit > first rule into the target system
    if req.to_unit:
        to_unit = require_unit(req.to_unit)
    elif req.target_system:
        rule = registry.find_conversion_to_system(from_unit, req.target_system, req.ingredient_name)
        if rule is None:
            raise HTTPException(
                status_code=422,
                detail=f"No conversion from {from_unit.abbreviation} to the {req.target_system.value} system",
            )
        to_unit = rule.to_unit
    else:
        raise HTTPException(status_code=400, detail="Either to_unit or target_system is required")

    # 2. Convert
    quantity = ExactQuantity(amount=req.qty, unit=from_unit)
    try:
        converted = registry.convert(quantity, to_unit, req.ingredient_name)
    except UnsupportedConversion as e:
        raise HTTPException(status_code=422, detail=str(e))

    rule = registry.find_rule(from_unit, to_unit, req.ingredient_name)
    return UnitConvertResponse(
        qty=converted.to_decimal(),
        unit=converted.unit,
        display=str(converted),
        rule=str(rule),
    )
