# src/chow/api/v1/endpoints/auth.py
"""Authentication endpoints for the Chow API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from chow.api.v1.dependencies import SessionDep, TokenServiceDep
from chow.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from chow.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_auth_service(db: SessionDep, tokens: TokenServiceDep) -> AuthService:
    return AuthService(db, tokens)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth: AuthServiceDep) -> UserResponse:
    """Create a new account with the ``user`` role."""
    user = auth.register(
        email=str(payload.email),
        username=payload.username,
        password=payload.password,
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, auth: AuthServiceDep) -> LoginResponse:
    """Exchange email and password for an access token."""
    user, token = auth.login(email=str(payload.email), password=payload.password)
    return LoginResponse(user=UserResponse.model_validate(user), access_token=token)
