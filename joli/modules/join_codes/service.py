from supabase import Client
from postgrest.exceptions import APIError
from joli.config import settings
from joli.core.exceptions import BindConflict, GameNotFound, JoliError
from joli.modules.games.schemas import GameResponse, GameStatus
from joli.modules.join_codes.allocator import UniqueCodeAllocator
from joli.modules.join_codes.generator import CODE_LENGTH, is_valid_format, normalize_code
from typing import Optional
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _is_unique_violation(error: APIError) -> bool:
    return getattr(error, "code", None) == UNIQUE_VIOLATION


class JoinCodeService:
    """Issues, revokes and resolves the join codes stored on games.join_code."""

    def __init__(self, supabase: Client, max_attempts: Optional[int] = None):
        self.supabase = supabase
        # Length stays CODE_LENGTH so every issued code passes is_valid_format
        self.allocator = UniqueCodeAllocator(
            self.is_code_unique,
            length=CODE_LENGTH,
            max_attempts=settings.join_code_max_attempts if max_attempts is None else max_attempts,
        )

    def is_code_unique(self, code: str) -> bool:
        """True when no game row holds ``code``, whatever its status"""
        result = self.supabase.table("games")\
            .select("id")\
            .eq("join_code", code)\
            .limit(1)\
            .execute()
        return not result.data

    def bind(self, game_id: str, code: str) -> None:
        """Store ``code`` on the game. Raises BindConflict on a unique violation."""
        try:
            result = self.supabase.table("games")\
                .update({"join_code": code, "updated_at": datetime.utcnow().isoformat()})\
                .eq("id", game_id)\
                .execute()
        except APIError as e:
            if _is_unique_violation(e):
                raise BindConflict(game_id, code)
            raise
        if not result.data:
            raise GameNotFound("Game not found")

    def unbind(self, game_id: str) -> None:
        result = self.supabase.table("games")\
            .update({"join_code": None, "updated_at": datetime.utcnow().isoformat()})\
            .eq("id", game_id)\
            .execute()
        if not result.data:
            raise GameNotFound("Game not found")

    def assign_join_code(self, game_id: str) -> str:
        """Allocate a fresh code and bind it to the game, replacing any previous one"""
        try:
            code = self.allocator.allocate_and_bind(lambda candidate: self.bind(game_id, candidate))
            logger.info(f"Join code assigned to game {game_id}")
            return code
        except JoliError:
            raise
        except Exception as e:
            logger.error(f"Error assigning join code to game {game_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def remove_join_code(self, game_id: str) -> bool:
        """Clear the game's join code, disabling participant access"""
        try:
            self.unbind(game_id)
            logger.info(f"Join code removed from game {game_id}")
            return True
        except JoliError:
            raise
        except Exception as e:
            logger.error(f"Error removing join code from game {game_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def find_game_by_join_code(self, candidate: str) -> Optional[GameResponse]:
        """Return the active game bound to ``candidate``, or None.

        Input is trimmed and upper-cased first; malformed codes return None
        without querying storage. Games in any status other than active never
        resolve, even while their join_code column is still set.
        """
        code = normalize_code(candidate)
        if not is_valid_format(code):
            return None
        try:
            result = self.supabase.table("games")\
                .select("*")\
                .eq("join_code", code)\
                .eq("status", GameStatus.active.value)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error finding game by join code: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            return None
        return GameResponse(**result.data[0])

    def resolve(self, candidate: str) -> Optional[str]:
        """Game id behind an active join code, or None"""
        game = self.find_game_by_join_code(candidate)
        return game.id if game else None
