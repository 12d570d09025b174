from typing import Annotated
from fastapi import APIRouter, Depends, status

from .dependencies import get_auth_service
from ..interface.users import LoginResponse, UserCreate, UserGet, UserLogin, UserUpdate
from ..permissions.auth import get_current_principal
from ..permissions.principal import Principal
from ..services.auth_service import AuthService

auth_router = APIRouter(prefix="/auth", tags=["auth"])
me_router = APIRouter(prefix="/me", tags=["auth"])


@auth_router.post("/register", response_model=UserGet, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, service: AuthService = Depends(get_auth_service)):
    """Create a new account"""
    return service.register(payload)


@auth_router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, service: AuthService = Depends(get_auth_service)):
    """Exchange email and password for a bearer token"""
    return service.login(payload.email, payload.password)


@me_router.get("", response_model=UserGet)
def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: AuthService = Depends(get_auth_service)
):
    return service.get_profile(principal.get_user_id_or_throw())


@me_router.put("", response_model=UserGet)
def update_me(
    payload: UserUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: AuthService = Depends(get_auth_service)
):
    return service.update_profile(principal.get_user_id_or_throw(), payload)
