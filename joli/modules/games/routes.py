from fastapi import APIRouter, Depends, Query
from joli.database.supabase_client import get_supabase_admin
from joli.modules.games.schemas import GameCreate, GameUpdate, GameResponse, GameStatus, GameType
from joli.modules.games.service import GameService
from joli.core.dependencies import require_organizer, check_game_owner
from supabase import Client
from typing import List, Optional, Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


def get_game_service(supabase: Client = Depends(get_supabase_admin)) -> GameService:
    return GameService(supabase)


def get_owned_game(
    game_id: str,
    user_data: Dict = Depends(require_organizer),
    service: GameService = Depends(get_game_service)
) -> GameResponse:
    """Load a game and make sure the calling organizer owns it"""
    game = service.get_game_by_id(game_id)
    check_game_owner(game, user_data)
    return game


@router.get("", response_model=List[GameResponse])
async def list_games(
    type: Optional[GameType] = None,
    status: Optional[GameStatus] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(require_organizer),
    service: GameService = Depends(get_game_service)
):
    """List the calling organizer's games"""
    return service.list_games(
        organizer_id=user_data["id"],
        game_type=type.value if type else None,
        status=status.value if status else None,
        limit=limit,
        offset=offset
    )


@router.post("", response_model=GameResponse, status_code=201)
async def create_game(
    game_data: GameCreate,
    user_data: Dict = Depends(require_organizer),
    service: GameService = Depends(get_game_service)
):
    """Create a new game (starts as draft)"""
    return service.create_game(game_data, user_data["id"])


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(game: GameResponse = Depends(get_owned_game)):
    """Get game by ID (owner only)"""
    return game


@router.put("/{game_id}", response_model=GameResponse)
async def update_game(
    game_data: GameUpdate,
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    """Update game details (owner only)"""
    return service.update_game(game.id, game_data)


@router.delete("/{game_id}", status_code=204)
async def delete_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    """Delete game (owner only)"""
    service.delete_game(game.id)
    return None


@router.post("/{game_id}/start", response_model=GameResponse)
async def start_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    """Start a draft or paused game; its join code becomes resolvable"""
    return service.transition(game, "start")


@router.post("/{game_id}/pause", response_model=GameResponse)
async def pause_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    return service.transition(game, "pause")


@router.post("/{game_id}/resume", response_model=GameResponse)
async def resume_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    return service.transition(game, "resume")


@router.post("/{game_id}/complete", response_model=GameResponse)
async def complete_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    return service.transition(game, "complete")


@router.post("/{game_id}/cancel", response_model=GameResponse)
async def cancel_game(
    game: GameResponse = Depends(get_owned_game),
    service: GameService = Depends(get_game_service)
):
    return service.transition(game, "cancel")
