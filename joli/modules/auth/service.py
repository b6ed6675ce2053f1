import hashlib
from supabase import Client
from joli.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, UserRole
from joli.core.cache import TTLCache
from fastapi import HTTPException
from datetime import datetime
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class AuthService:
    def __init__(self, supabase: Client, user_cache: Optional[TTLCache] = None):
        self.supabase = supabase
        self.user_cache = user_cache

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth and create their profile row"""
        try:
            user_metadata = {"role": register_data.role.value}
            if register_data.first_name:
                user_metadata["first_name"] = register_data.first_name
            if register_data.last_name:
                user_metadata["last_name"] = register_data.last_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            try:
                self.supabase.table("users").insert({
                    "id": auth_response.user.id,
                    "email": register_data.email,
                    "first_name": register_data.first_name,
                    "last_name": register_data.last_name,
                    "role": register_data.role.value,
                    "is_active": True,
                }).execute()
            except Exception as e:
                # Profile falls back to user_metadata until the row exists
                logger.warning(f"Could not create users row for {auth_response.user.id}: {e}")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                role=register_data.role,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def _get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """users row for this id; None when missing or the lookup fails"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
        except Exception as e:
            logger.warning(f"Profile lookup failed for {user_id}: {e}")
            return None
        self._touch_last_login(user_id)
        return result.data[0]

    def _touch_last_login(self, user_id: str) -> None:
        """Best-effort last_login_at stamp; never changes the outcome of authentication"""
        try:
            self.supabase.table("users")\
                .update({"last_login_at": datetime.utcnow().isoformat()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Could not record last login for {user_id}: {e}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a Supabase JWT to the current user, enriched with role from the users table"""
        cache_key = _token_key(token)
        if self.user_cache is not None:
            cached = self.user_cache.get(cache_key)
            if cached is not None:
                return cached
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

        metadata = user.user_metadata or {}
        profile = self._get_profile(user.id) or {}
        full_name = (metadata.get("name") or "").split(" ")
        user_data = {
            "id": user.id,
            "email": user.email,
            "first_name": profile.get("first_name") or metadata.get("first_name") or full_name[0] or "User",
            "last_name": profile.get("last_name") or metadata.get("last_name") or " ".join(full_name[1:]),
            "role": profile.get("role") or metadata.get("role") or UserRole.participant.value,
            "is_active": profile.get("is_active", True),
            "email_verified": bool(getattr(user, "email_confirmed_at", None)),
        }
        if not user_data["is_active"]:
            raise HTTPException(status_code=403, detail="Account is deactivated")
        if self.user_cache is not None:
            self.user_cache.set(cache_key, user_data)
        return user_data

    def logout(self, token: str) -> bool:
        """Logout user and drop the cached identity for this token"""
        if self.user_cache is not None:
            self.user_cache.invalidate(_token_key(token))
        try:
            # Supabase JWTs are stateless; they stay valid until they expire
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
