"""Process-wide Supabase clients.

Auth calls and profile reads go through the anon-key client, so RLS applies.
Game and join-code writes go through the service-role client: organizer
ownership is checked in the routes before anything is written.
"""
import logging
import threading
from typing import Dict, Optional

from supabase import create_client, Client
from joli.config import settings

logger = logging.getLogger(__name__)

ANON = "anon"
SERVICE_ROLE = "service_role"

_clients: Dict[str, Client] = {}
_lock = threading.Lock()


def _key_for(role: str) -> Optional[str]:
    if role == SERVICE_ROLE:
        return settings.supabase_service_role_key
    return settings.supabase_key


def get_client(role: str = ANON) -> Client:
    """Client for ``role``; the service role falls back to anon when no key is configured."""
    key = _key_for(role)
    if not key:
        if role == ANON:
            raise RuntimeError("SUPABASE_KEY is not configured")
        logger.debug("SUPABASE_SERVICE_ROLE_KEY not set; game writes use the anon client")
        return get_client(ANON)
    with _lock:
        if role not in _clients:
            _clients[role] = create_client(settings.supabase_url, key)
        return _clients[role]


def reset_clients() -> None:
    with _lock:
        _clients.clear()


def get_supabase() -> Client:
    return get_client(ANON)


def get_supabase_admin() -> Client:
    return get_client(SERVICE_ROLE)
