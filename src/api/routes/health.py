"""Health check endpoints.

- /healthz: Liveness probe (is the process alive?)
- /readyz: Readiness probe (are the backends configured and the app started?)
- /health: Combined view
- /metrics: Prometheus metrics endpoint
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_store
from src.observability.metrics import render_latest
from src.orchestrator.store import ConversationStore

router = APIRouter(tags=["health"])


# Health status tracking
_ready: bool = False
_components: dict[str, bool] = {
    "store": False,
    "asr": False,
    "llm": False,
}

CRITICAL_COMPONENTS = ["store", "asr", "llm"]


def set_ready(ready: bool) -> None:
    """Set overall readiness status."""
    global _ready
    _ready = ready


def set_component_health(component: str, healthy: bool) -> None:
    """Set health status for a specific component."""
    if component in _components:
        _components[component] = healthy


def get_component_health() -> dict[str, bool]:
    """Get health status of all components."""
    return _components.copy()


def _all_critical_ready() -> bool:
    return all(_components.get(c, False) for c in CRITICAL_COMPONENTS)


@router.get("/healthz", response_model=dict[str, str])
async def healthz() -> dict[str, str]:
    """Liveness probe.

    Returns 200 if the process is alive.
    """
    return {"status": "alive"}


@router.get("/readyz")
async def readyz(response: Response) -> dict[str, Any]:
    """Readiness probe.

    Returns 200 if the service is ready to accept traffic.
    Returns 503 if any critical component is unhealthy.
    """
    if _ready and _all_critical_ready():
        return {
            "status": "ready",
            "components": _components,
        }

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "not_ready",
        "components": _components,
    }


@router.get("/health")
async def health(
    response: Response,
    store: ConversationStore = Depends(get_store),
) -> dict[str, Any]:
    """Combined health endpoint with room count."""
    healthy = _ready and _all_critical_ready()
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if healthy else "degraded",
        "ready": _ready,
        "components": _components,
        "rooms": len(store),
    }


async def metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
