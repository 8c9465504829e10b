from fastapi import APIRouter, Depends

from ..deps import get_registry
from ..services.unit_conversion import ConversionRegistry

router = APIRouter()


@router.get("/ready")
def ready(registry: ConversionRegistry = Depends(get_registry)):
    return {"ok": True, "rules": registry.rule_count()}
