"""
Authentication endpoints: sign-in and the role-specific signups.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.models.user import User
from marketplace.schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    DoctorSignUpRequest,
    OrganizerSignUpRequest,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)
from marketplace.services.auth_service import (
    authenticate_user,
    register_doctor,
    register_organizer,
    register_user,
)
from marketplace.services.rate_limit_service import enforce_signin_rate_limit
from marketplace.core.security import get_current_user, issue_token

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post(
    "/signin",
    response_model=AuthResponse,
    dependencies=[Depends(enforce_signin_rate_limit)],
)
async def signin(data: SignInRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a bearer token plus the user record."""
    user, token = await authenticate_user(db, data)
    return _auth_response(user, token)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """Register a regular account."""
    user = await register_user(db, data)
    return _auth_response(user, issue_token(user))


@router.post("/organizer/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def organizer_signup(data: OrganizerSignUpRequest, db: AsyncSession = Depends(get_db)):
    """Register an organizer account with its company profile."""
    user = await register_organizer(db, data)
    return _auth_response(user, issue_token(user))


@router.post("/doctor/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def doctor_signup(data: DoctorSignUpRequest, db: AsyncSession = Depends(get_db)):
    """Register a doctor account; the profile starts unverified."""
    user = await register_doctor(db, data)
    return _auth_response(user, issue_token(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: User = Depends(get_current_user)):
    return CurrentUserResponse(user=UserResponse.model_validate(user))
