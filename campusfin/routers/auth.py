"""Authentication router for CampusFin."""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.schemas.auth import SignInRequest, SignUpRequest, TokenResponse
from campusfin.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])  # main.py mounts this under /auth


def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    """Dependency for getting AuthService instance."""
    return AuthService(session)


@router.post("/sign-up", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest, service: AuthService = Depends(get_auth_service)):
    """Register a new user and seed their default categories."""
    return service.sign_up(request)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(request: SignInRequest, service: AuthService = Depends(get_auth_service)):
    return service.sign_in(request)
