"""
Core dependencies for route protection and ownership checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from joli.config import settings
from joli.core.cache import TTLCache
from joli.database.supabase_client import get_supabase
from joli.modules.auth.schemas import UserRole
from joli.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

# Token -> user identity, shared by every AuthService built for a request
auth_user_cache: TTLCache = TTLCache(
    ttl_seconds=settings.auth_cache_ttl_seconds,
    max_size=settings.auth_cache_max_size,
)


def get_auth_cache() -> TTLCache:
    return auth_user_cache


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    cache: TTLCache = Depends(get_auth_cache)
) -> AuthService:
    return AuthService(supabase, cache)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)


def require_organizer(user_data: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependency that only lets organizers through"""
    if user_data.get("role") != UserRole.organizer.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organizer access required"
        )
    return user_data


def check_game_owner(game: Any, user_data: Dict[str, Any]) -> None:
    """Only the organizer who created a game may manage it"""
    organizer_id = getattr(game, "organizer_id", None)
    if organizer_id != user_data["id"]:
        logger.info(f"User {user_data['id']} denied access to game owned by {organizer_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
