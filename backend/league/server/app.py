from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from league.logic.exceptions import (
    DuplicatePlayerError,
    LeagueRuleError,
    NotFoundError,
    RecomputeFailedError,
)
from league.server.handlers import (
    create_game,
    daily_standings,
    dashboard,
    delete_game,
    game_detail,
    leaderboard,
    leaderboards,
    list_days,
    list_games,
    list_players,
    player_detail,
    player_history,
    register_player,
    update_game,
)
from league.server.settings import LeagueServerSettings
from league.service import LeagueService
from shared.db import Database, SqliteDailySummaryRepository, SqliteGameRepository, SqlitePlayerRepository
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request


async def _http_error_handler(_request: Request, exc: Exception) -> Response:
    http_exc = cast("HTTPException", exc)
    if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=http_exc.status_code, headers=http_exc.headers)
    return JSONResponse({"error": http_exc.detail}, status_code=http_exc.status_code, headers=http_exc.headers)


async def _rule_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _not_found_handler(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.NOT_FOUND)


async def _duplicate_handler(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.CONFLICT)


async def _recompute_failed_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("write rejected, previous state kept", error=str(exc))
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.SERVICE_UNAVAILABLE)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(settings: LeagueServerSettings | None = None) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = LeagueServerSettings()

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/players", list_players, methods=["GET"], name="list_players"),
        Route("/players", register_player, methods=["POST"], name="register_player"),
        Route("/players/{player_id}", player_detail, methods=["GET"], name="player_detail"),
        Route("/players/{player_id}/history", player_history, methods=["GET"], name="player_history"),
        Route("/games", list_games, methods=["GET"], name="list_games"),
        Route("/games", create_game, methods=["POST"], name="create_game"),
        Route("/games/{game_id}", game_detail, methods=["GET"], name="game_detail"),
        Route("/games/{game_id}", update_game, methods=["PUT"], name="update_game"),
        Route("/games/{game_id}", delete_game, methods=["DELETE"], name="delete_game"),
        Route("/daily", list_days, methods=["GET"], name="list_days"),
        Route("/daily/{day}", daily_standings, methods=["GET"], name="daily_standings"),
        Route("/leaderboards", leaderboards, methods=["GET"], name="leaderboards"),
        Route("/leaderboards/{view}", leaderboard, methods=["GET"], name="leaderboard"),
        Route("/dashboard", dashboard, methods=["GET"], name="dashboard"),
    ]

    db = Database(settings.database_path, timeout=settings.db_timeout_seconds)
    db.connect()
    league_service = LeagueService(
        SqlitePlayerRepository(db),
        SqliteGameRepository(db),
        SqliteDailySummaryRepository(db),
        min_games=settings.leaderboard_min_games,
    )

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            HTTPException: _http_error_handler,
            ValidationError: _rule_error_handler,
            LeagueRuleError: _rule_error_handler,
            NotFoundError: _not_found_handler,
            DuplicatePlayerError: _duplicate_handler,
            RecomputeFailedError: _recompute_failed_handler,
        },
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.state.db = db
    app.state.settings = settings
    app.state.league_service = league_service

    logger.info("league server ready", database_path=settings.database_path)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory league.server.app:get_app."""
    settings = LeagueServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
