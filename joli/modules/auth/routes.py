from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPAuthorizationCredentials
from joli.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from joli.modules.auth.service import AuthService
from joli.core.dependencies import get_auth_service, get_current_user, security
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new organizer or participant"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user, including role"""
    return current_user
