import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware

from luckydraw.db import engine
from luckydraw.init_db import create_tables
from luckydraw.load_secrets import (
    cors_origin,
    create_tables_on_startup,
    frontend_origin,
    log_level,
    server_port,
)
from luckydraw.routers import draw, health

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:5173"]

logging.basicConfig(level=log_level)


def build_allowed_origins(
    frontend_origin: Optional[str] = None, cors_origin: Optional[str] = None
) -> List[str]:
    """Local dev frontend, FRONTEND_ORIGIN and the comma separated CORS_ORIGIN."""
    origins = list(DEFAULT_ALLOWED_ORIGINS)
    if frontend_origin:
        origins.append(frontend_origin)
    if cors_origin:
        origins.extend(origin.strip() for origin in cors_origin.split(",") if origin.strip())
    return origins


@asynccontextmanager
async def lifespan(app):
    """Optionally create the tables, then dispose the engine when the server stops."""
    if create_tables_on_startup:
        await create_tables(engine)
    logging.info("Start Server")
    try:
        yield
    finally:
        await engine.dispose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=build_allowed_origins(frontend_origin, cors_origin),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.health_router)
app.include_router(draw.draw_router)
app.add_exception_handler(RequestValidationError, draw.draw_validation_error_handler)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=server_port)
