from supabase import Client
from joli.modules.games.schemas import GameCreate, GameUpdate, GameResponse, GameStatus
from joli.core.exceptions import GameNotFound, InvalidStatusTransition, JoliError
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

# action -> (statuses it may start from, resulting status, past tense for messages)
STATUS_TRANSITIONS = {
    "start": ({GameStatus.draft, GameStatus.paused}, GameStatus.active, "started"),
    "pause": ({GameStatus.active}, GameStatus.paused, "paused"),
    "resume": ({GameStatus.paused}, GameStatus.active, "resumed"),
    "complete": ({GameStatus.draft, GameStatus.active, GameStatus.paused, GameStatus.cancelled}, GameStatus.completed, "completed"),
    "cancel": ({GameStatus.draft, GameStatus.active, GameStatus.paused}, GameStatus.cancelled, "cancelled"),
}


def _dump(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class GameService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_game(self, game_data: GameCreate, organizer_id: str) -> GameResponse:
        """Create a new game in draft status"""
        try:
            insert_data = {
                "title": game_data.title,
                "description": game_data.description or "",
                "image": game_data.image,
                "type": game_data.type.value,
                "organizer_id": organizer_id,
                "rules": game_data.rules,
                "max_participants": game_data.max_participants,
                "start_time": _dump(game_data.start_time),
                "end_time": _dump(game_data.end_time),
                "status": GameStatus.draft.value,
                "created_at": datetime.utcnow().isoformat(),
            }
            result = self.supabase.table("games").insert(insert_data).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create game")

            logger.info(f"Game {result.data[0]['id']} created by organizer {organizer_id}")
            return GameResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating game: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_game_by_id(self, game_id: str) -> GameResponse:
        """Get game by ID"""
        try:
            result = self.supabase.table("games")\
                .select("*")\
                .eq("id", game_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise GameNotFound("Game not found")

            return GameResponse(**result.data[0])
        except JoliError:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_games(
        self,
        organizer_id: str,
        game_type: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[GameResponse]:
        """List an organizer's games, newest first"""
        try:
            query = self.supabase.table("games")\
                .select("*")\
                .eq("organizer_id", organizer_id)
            if game_type:
                query = query.eq("type", game_type)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [GameResponse(**game) for game in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_game(self, game_id: str, game_data: GameUpdate) -> GameResponse:
        """Update game details (status and join code have their own operations)"""
        try:
            update_data = {
                key: _dump(value)
                for key, value in game_data.model_dump(exclude_unset=True).items()
                if value is not None
            }
            update_data["updated_at"] = datetime.utcnow().isoformat()

            result = self.supabase.table("games")\
                .update(update_data)\
                .eq("id", game_id)\
                .execute()

            if not result.data:
                raise GameNotFound("Game not found")

            return GameResponse(**result.data[0])
        except JoliError:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_game_status(self, game_id: str, status: GameStatus) -> GameResponse:
        """Set game status. The join code is left untouched; it only resolves while active."""
        try:
            result = self.supabase.table("games")\
                .update({"status": status.value, "updated_at": datetime.utcnow().isoformat()})\
                .eq("id", game_id)\
                .execute()

            if not result.data:
                raise GameNotFound("Game not found")

            return GameResponse(**result.data[0])
        except JoliError:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def transition(self, game: GameResponse, action: str) -> GameResponse:
        """Apply a lifecycle action (start, pause, resume, complete, cancel)"""
        allowed_from, target, past = STATUS_TRANSITIONS[action]
        if game.status not in {s.value for s in allowed_from}:
            raise InvalidStatusTransition(past, game.status)
        logger.info(f"Game {game.id}: {game.status} -> {target.value}")
        return self.update_game_status(game.id, target)

    def delete_game(self, game_id: str) -> bool:
        """Delete game"""
        try:
            result = self.supabase.table("games")\
                .delete()\
                .eq("id", game_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
