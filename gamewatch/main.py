"""FastAPI app exposing game activation and the active-game listing."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import Response

from gamewatch.activation import ActivationService
from gamewatch.errors import EncodingError
from gamewatch.log_buffer import get_buffer_handler, install_buffer_handler
from gamewatch.pbp.client import UpstreamClient
from gamewatch.registry import GameRegistry
from gamewatch.schemas import ActiveGamesResponse, LogsResponse
from gamewatch.settings import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter()

SERVER_ERROR_BODY = '{"error":"server error occurred"}'


def get_activation_service(request: Request) -> ActivationService:
    return request.app.state.activation


def _encode_active_games(games: list[str]) -> str:
    try:
        return ActiveGamesResponse(games=games).model_dump_json()
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"could not encode active games: {exc}") from exc


@router.get("/active", response_model=ActiveGamesResponse)
async def get_active_games(service: ActivationService = Depends(get_activation_service)):
    try:
        body = _encode_active_games(service.list_active())
    except EncodingError:
        logger.exception("Error encoding active games")
        return Response(
            content=SERVER_ERROR_BODY,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            media_type="application/json",
        )
    return Response(content=body, media_type="application/json")


@router.post("/activate/{code}", status_code=status.HTTP_202_ACCEPTED)
async def activate_game(code: str, service: ActivationService = Depends(get_activation_service)):
    service.activate(code)
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.delete("/activate/{code}", status_code=status.HTTP_202_ACCEPTED)
async def deactivate_game(code: str, service: ActivationService = Depends(get_activation_service)):
    if not service.cancel(code):
        raise HTTPException(status_code=404, detail=f"No running poller for {code}")
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.get("/api/logs", response_model=LogsResponse)
def api_logs(limit: int = 100, level: str | None = None, source: str | None = None):
    handler = get_buffer_handler()
    return {"entries": handler.entries(limit=limit, level=level, source=source)}


def create_app(
    settings: Settings | None = None,
    client: UpstreamClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="gamewatch", version="0.1.0")
    app.state.settings = settings
    app.state.registry = GameRegistry()
    app.state.activation = ActivationService(
        app.state.registry,
        client or UpstreamClient(settings),
        settings.poll_interval_seconds,
    )
    app.include_router(router)

    @app.on_event("startup")
    async def _startup() -> None:
        install_buffer_handler()
        logger.info(
            "gamewatch starting up: poll_interval=%ss fetch=%s",
            settings.poll_interval_seconds,
            settings.fetch_base_url,
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.activation.shutdown()
        logger.info("gamewatch stopped")

    return app


app = create_app()
