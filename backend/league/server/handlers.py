"""JSON handlers for players, games, daily standings, leaderboards and the dashboard."""

from __future__ import annotations

import json
from datetime import date
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, Response

from league.logic.types import LeaderboardView
from league.types import RegisterPlayerRequest, SaveGameRequest

if TYPE_CHECKING:
    from pydantic import BaseModel
    from starlette.requests import Request

    from league.service import LeagueService


def _service(request: Request) -> LeagueService:
    return request.app.state.league_service


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json")


async def _read_json(request: Request) -> dict[str, Any]:
    """Decode a JSON object body; an empty body reads as {}."""
    raw_body = await request.body()
    if not raw_body.strip():
        return {}
    try:
        body = json.loads(raw_body)
    except ValueError as exc:
        raise HTTPException(HTTPStatus.UNPROCESSABLE_ENTITY, "Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise HTTPException(HTTPStatus.UNPROCESSABLE_ENTITY, "JSON body must be an object")
    return body


async def list_players(request: Request) -> JSONResponse:
    """GET /players - every registered player with lifetime statistics."""
    service = _service(request)
    players = await service.list_players()
    stats = {s.player_id: s for s in await service.list_player_statistics()}
    entries = [{"player": _dump(p), "stats": _dump(stats[p.player_id])} for p in players if p.player_id in stats]
    return JSONResponse({"players": entries})


async def register_player(request: Request) -> JSONResponse:
    """POST /players - register a new player by name."""
    body = RegisterPlayerRequest.model_validate(await _read_json(request))
    player = await _service(request).register_player(body.name)
    return JSONResponse({"player": _dump(player)}, status_code=HTTPStatus.CREATED)


async def player_detail(request: Request) -> JSONResponse:
    service = _service(request)
    player_id = request.path_params["player_id"]
    player = await service.get_player(player_id)
    stats = await service.get_player_statistics(player_id)
    return JSONResponse({"player": _dump(player), "stats": _dump(stats)})


async def player_history(request: Request) -> JSONResponse:
    entries = await _service(request).get_player_history(request.path_params["player_id"])
    return JSONResponse({"history": [_dump(e) for e in entries]})


async def list_games(request: Request) -> JSONResponse:
    items = await _service(request).list_games()
    return JSONResponse({"games": [_dump(item) for item in items]})


async def create_game(request: Request) -> JSONResponse:
    """POST /games - record a game; all rounds are validated before anything is stored."""
    body = SaveGameRequest.model_validate(await _read_json(request))
    game = await _service(request).create_game(body)
    return JSONResponse({"game": _dump(game)}, status_code=HTTPStatus.CREATED)


async def game_detail(request: Request) -> JSONResponse:
    detail = await _service(request).get_game_detail(request.path_params["game_id"])
    return JSONResponse(_dump(detail))


async def update_game(request: Request) -> JSONResponse:
    """PUT /games/{game_id} - replace a game's date, venue and rounds."""
    body = SaveGameRequest.model_validate(await _read_json(request))
    game = await _service(request).update_game(request.path_params["game_id"], body)
    return JSONResponse({"game": _dump(game)})


async def delete_game(request: Request) -> Response:
    await _service(request).delete_game(request.path_params["game_id"])
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def list_days(request: Request) -> JSONResponse:
    days = await _service(request).list_days()
    return JSONResponse({"dates": [d.isoformat() for d in days]})


async def daily_standings(request: Request) -> JSONResponse:
    """GET /daily/{day} - the day's summaries in daily-rank order."""
    raw_day = request.path_params["day"]
    try:
        day = date.fromisoformat(raw_day)
    except ValueError as exc:
        raise HTTPException(HTTPStatus.UNPROCESSABLE_ENTITY, f"Invalid date: {raw_day}") from exc
    standings = await _service(request).get_daily_standings(day)
    return JSONResponse({"date": day.isoformat(), "standings": [_dump(s) for s in standings]})


async def leaderboards(request: Request) -> JSONResponse:
    views = await _service(request).get_leaderboards()
    return JSONResponse({view.value: [_dump(entry) for entry in entries] for view, entries in views.items()})


async def leaderboard(request: Request) -> JSONResponse:
    raw_view = request.path_params["view"]
    try:
        view = LeaderboardView(raw_view)
    except ValueError as exc:
        raise HTTPException(HTTPStatus.NOT_FOUND, f"Unknown leaderboard: {raw_view}") from exc
    entries = await _service(request).get_leaderboard(view)
    return JSONResponse({"view": view.value, "entries": [_dump(entry) for entry in entries]})


async def dashboard(request: Request) -> JSONResponse:
    summary = await _service(request).get_dashboard()
    return JSONResponse(_dump(summary))
