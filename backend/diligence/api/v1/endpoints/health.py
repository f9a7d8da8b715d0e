"""
Health check endpoint.
"""

from fastapi import APIRouter

from diligence.api.v1.endpoints.due_diligence import _runs
from diligence.services.circuit_breaker import get_circuit_breaker

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with verification provider breaker status."""
    circuit = get_circuit_breaker()

    return {
        "status": "ok",
        "active_runs": sum(1 for r in _runs.values() if r.status in ("pending", "running")),
        "circuit_breaker": circuit.get_status()
    }
