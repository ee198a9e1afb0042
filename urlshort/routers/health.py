from fastapi import APIRouter

from urlshort.db.Connection import database

router = APIRouter(tags=["health"])


# simple liveness
@router.get("/health")
def health():
    return {"status": "healthy", "service": "url-shortener"}


# readiness: the database must answer, the cache is optional
@router.get("/ready")
def readiness():
    details = {
        "db": "ok" if database.verify_database_connection() else "error",
        "cache": "disabled",
    }
    if database.redis_client is not None:
        details["cache"] = "ok" if database.verify_redis_connection() else "error"

    return {"ready": details["db"] == "ok", "details": details}
