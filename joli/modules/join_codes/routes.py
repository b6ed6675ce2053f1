from fastapi import APIRouter, Depends, Request
from joli.config import settings
from joli.database.supabase_client import get_supabase_admin
from joli.modules.games.routes import get_owned_game
from joli.modules.games.schemas import GameResponse
from joli.modules.join_codes.generator import is_valid_format, normalize_code
from joli.modules.join_codes.schemas import JoinCodeResponse, ParticipantGameView, JoinGameResponse
from joli.modules.join_codes.service import JoinCodeService
from joli.core.dependencies import get_current_user
from joli.core.rate_limit import limiter
from joli.core.exceptions import GameNotFound, InvalidJoinCodeFormat
from supabase import Client
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["join-codes"])


def get_join_code_service(supabase: Client = Depends(get_supabase_admin)) -> JoinCodeService:
    return JoinCodeService(supabase)


def _participant_view(game: GameResponse) -> ParticipantGameView:
    return ParticipantGameView(**game.model_dump(include=set(ParticipantGameView.model_fields)))


def _lookup(code: str, service: JoinCodeService) -> GameResponse:
    if not is_valid_format(normalize_code(code)):
        raise InvalidJoinCodeFormat()
    game = service.find_game_by_join_code(code)
    if not game:
        raise GameNotFound()
    return game


@router.post("/{game_id}/join-code/generate", response_model=JoinCodeResponse)
async def generate_join_code(
    game: GameResponse = Depends(get_owned_game),
    service: JoinCodeService = Depends(get_join_code_service)
):
    """
    Generate a new join code for a game (owner only).
    Codes can be issued for draft games; they only resolve once the game is active.
    """
    join_code = service.assign_join_code(game.id)
    return JoinCodeResponse(game_id=game.id, join_code=join_code)


@router.delete("/{game_id}/join-code", status_code=200)
async def remove_join_code(
    game: GameResponse = Depends(get_owned_game),
    service: JoinCodeService = Depends(get_join_code_service)
):
    """Remove the game's join code, disabling participant access (owner only)"""
    service.remove_join_code(game.id)
    return {"message": "Join code removed successfully"}


@router.get("/join/{code}", response_model=ParticipantGameView)
@limiter.limit(settings.join_rate_limit)
async def find_game_by_code(
    request: Request,
    code: str,
    service: JoinCodeService = Depends(get_join_code_service)
):
    """Public lookup of an active game by join code"""
    return _participant_view(_lookup(code, service))


@router.post("/join/{code}", response_model=JoinGameResponse)
@limiter.limit(settings.join_rate_limit)
async def join_game_by_code(
    request: Request,
    code: str,
    user_data: Dict = Depends(get_current_user),
    service: JoinCodeService = Depends(get_join_code_service)
):
    """Join an active game using its join code"""
    game = _lookup(code, service)
    logger.info(f"User {user_data['id']} joined game {game.id}")
    return JoinGameResponse(message="Successfully joined the game", game=_participant_view(game))
