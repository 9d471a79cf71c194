import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Header, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from luckydraw import load_secrets
from luckydraw.db import Session
from luckydraw.domain.sign_display import sign_display
from luckydraw.models.dc_models import (
    AllocationResultModel,
    DrawSchemeModel,
    DrawV2RequestModel,
    SignDisplayModel,
)
from luckydraw.services.draw_orchestrator import DrawOrchestrator
from luckydraw.services.errors import (
    GuestIdValidationError,
    RoundStateConflictError,
    is_connectivity_error,
)
from luckydraw.services.pool_allocator import PoolAllocator

draw_router = APIRouter()
GUEST_DRAW_PATHS = {"/api/v2/draw", "/api/draw"}
pool_allocator = PoolAllocator(Session)
draw_orchestrator = DrawOrchestrator(Session)


def get_pool_allocator() -> PoolAllocator:
    return pool_allocator


def get_draw_orchestrator() -> DrawOrchestrator:
    return draw_orchestrator


def get_api_draw_scheme() -> DrawSchemeModel:
    try:
        return DrawSchemeModel(load_secrets.api_draw_scheme)
    except ValueError:
        logging.warning(f"Unknown API_DRAW_SCHEME {load_secrets.api_draw_scheme!r}, using v2")
        return DrawSchemeModel.v2


def draw_failure_response(exc: Exception, context: str) -> JSONResponse:
    """Map an unexpected draw failure to 503 (store unreachable) or 500, without internal detail."""
    if is_connectivity_error(exc):
        logging.error(f"{context}: database unavailable: {exc!r}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Service Unavailable", "message": "Database unavailable"},
        )
    logging.exception(f"{context}: draw failed")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": "Draw failed"},
    )


def pick_guest_id(body: Optional[DrawV2RequestModel], x_guest_id: Optional[str]) -> Optional[str]:
    """Body id if it is not blank, else the X-Guest-Id header."""
    if body is not None and body.guest_id is not None and body.guest_id.strip():
        return body.guest_id
    return x_guest_id


def guest_id_error_response(exc: GuestIdValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": str(exc)},
    )


async def draw_validation_error_handler(request: Request, exc: RequestValidationError):
    """Unparseable v2 draw bodies get the same 400 shape as a bad guest id; other routes keep 422."""
    if request.url.path not in GUEST_DRAW_PATHS:
        return await request_validation_exception_handler(request, exc)

    fields = {str(part) for error in exc.errors() for part in error.get("loc", ())}
    if fields & {"guest_id", "guestId"}:
        error = GuestIdValidationError("guest_id must be a string")
    else:
        error = GuestIdValidationError("invalid request body")
    logging.info(f"{request.method} {request.url.path}: rejected body: {exc.errors()!r}")
    return guest_id_error_response(error)


def to_display(result: AllocationResultModel) -> dict:
    if result.is_out_of_stock:
        return result.to_response()
    sign = result.sign
    title, description = sign_display(sign.level, sign.type)
    display = SignDisplayModel(
        id=sign.id,
        type=sign.type,
        title=title,
        level=sign.level,
        description=description,
        image_url="",
    )
    return display.model_dump(by_alias=True)


class PoolDrawAPI:
    @staticmethod
    @draw_router.post("/draw")
    async def draw(allocator: PoolAllocator = Depends(get_pool_allocator)):
        try:
            result = await allocator.allocate()
        except Exception as e:
            return draw_failure_response(e, "POST /draw")
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_response())

    @staticmethod
    @draw_router.post("/api/v1/draw")
    async def draw_display(allocator: PoolAllocator = Depends(get_pool_allocator)):
        try:
            result = await allocator.allocate()
        except Exception as e:
            return draw_failure_response(e, "POST /api/v1/draw")
        return JSONResponse(status_code=status.HTTP_200_OK, content=to_display(result))


class GuestDrawAPI:
    @staticmethod
    @draw_router.post("/api/v2/draw")
    async def draw(
        body: Optional[DrawV2RequestModel] = Body(None),
        x_guest_id: Optional[str] = Header(None),
        orchestrator: DrawOrchestrator = Depends(get_draw_orchestrator),
    ):
        guest_id = pick_guest_id(body, x_guest_id)
        try:
            result = await orchestrator.draw(guest_id)
        except GuestIdValidationError as e:
            return guest_id_error_response(e)
        except RoundStateConflictError as e:
            logging.warning(f"POST /api/v2/draw: {e}")
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"success": False, "error": "draw already in progress"},
            )
        except Exception as e:
            return draw_failure_response(e, "POST /api/v2/draw")
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_response())


@draw_router.post("/api/draw")
async def draw_api(
    body: Optional[DrawV2RequestModel] = Body(None),
    x_guest_id: Optional[str] = Header(None),
    scheme: DrawSchemeModel = Depends(get_api_draw_scheme),
    allocator: PoolAllocator = Depends(get_pool_allocator),
    orchestrator: DrawOrchestrator = Depends(get_draw_orchestrator),
):
    """Serve /api/draw with the scheme selected by API_DRAW_SCHEME."""
    if scheme == DrawSchemeModel.v1:
        return await PoolDrawAPI.draw_display(allocator=allocator)
    return await GuestDrawAPI.draw(body=body, x_guest_id=x_guest_id, orchestrator=orchestrator)
