from typing import Annotated, Any

from fastapi import APIRouter, Depends

from auth_service.core.resilience import CircuitState, ResilienceManager
from auth_service.presentation.dependencies.services import get_resilience_manager

router = APIRouter()


@router.get("/health", tags=["Health"])
async def health_check(
    manager: Annotated[ResilienceManager, Depends(get_resilience_manager)],
) -> dict[str, Any]:
    """Report service status and the state of every circuit breaker."""
    breakers = manager.get_all_status()
    degraded = any(b["state"] != CircuitState.CLOSED.value for b in breakers.values())
    return {
        "status": "DEGRADED" if degraded else "UP",
        "circuit_breakers": breakers,
    }
