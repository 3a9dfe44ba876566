"""
Auth API routes — register, login.

Route prefix: /api/auth
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth.dependencies import get_auth_service
from auth.service import AuthService

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Request fields are optional; AuthService decides what "missing" means.


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserView(BaseModel):
    id: str
    username: str
    email: str


class RegisterResponse(BaseModel):
    message: str
    user: UserView


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserView


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user."""
    return await service.register(req.username, req.email, req.password)


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    return await service.login(req.email, req.password)
