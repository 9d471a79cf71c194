from fastapi import APIRouter

health_router = APIRouter()


@health_router.get("/api/ping")
async def ping():
    return {"msg": "pong"}
