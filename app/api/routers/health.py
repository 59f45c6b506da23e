from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.db.session import ping
from app.features.todos.schemas import HealthOut

router = APIRouter(tags=["health"])


def _database_status(request: Request) -> str:
    engine = request.app.state.engine
    if engine is None:
        return "not configured"
    return "connected" if ping(engine) else "unreachable"


@router.get(
    "/health",
    summary="Service health",
    description="Never fails: reports whether the database answers and whether storage is configured.",
    response_model=HealthOut,
)
def health(request: Request):
    database = _database_status(request)
    blob_store = request.app.state.blob_store
    return {
        "status": "OK" if database == "connected" else "DEGRADED",
        "timestamp": datetime.now(timezone.utc),
        "services": {
            "database": database,
            "storage": "configured" if blob_store is not None else "not configured",
        },
    }
