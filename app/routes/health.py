from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.db import db_ping
from app.redis_client import redis_ping

router = APIRouter(tags=["health"])

PROBES = (("db", db_ping), ("redis", redis_ping))

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

# readiness probe
@router.get("/ready")
def ready():
    checks: dict[str, bool] = {name: bool(fn()) for name, fn in PROBES}
    ok = all(checks.values())

    # 200 only when every probe passes, 503 otherwise
    return JSONResponse(
        status_code=200 if ok else 503,
        content={"status": "ok" if ok else "unready", "checks": checks},
    )
