"""
Authentication service: role-specific registration, sign-in, admin bootstrap.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.models.user import User
from marketplace.models.organizer import Company, OrganizerProfile, DoctorProfile
from marketplace.schemas.user import (
    SignInRequest,
    SignUpRequest,
    OrganizerSignUpRequest,
    DoctorSignUpRequest,
)
from marketplace.domain import Role, SELF_SERVICE_ROLES
from marketplace.core.config import get_settings
from marketplace.core.metrics import record_signin
from marketplace.core.security import hash_password, verify_password, issue_token
from marketplace.core.logging import get_logger

logger = get_logger(__name__)


def _email_taken(email: str) -> HTTPException:
    logger.warning("registration_failed", reason="email_exists", email=email)
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="User with this email already exists",
    )


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise _email_taken(email)


async def _create_user(db: AsyncSession, name: str, email: str, password: str, role: Role, phone=None) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role.value,
        phone=phone,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent signup took the email after _ensure_email_free
        await db.rollback()
        raise _email_taken(email)
    return user


async def _reload_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def register_user(db: AsyncSession, data: SignUpRequest) -> User:
    """
    Register a regular account. Only self-service roles are accepted here;
    organizers and doctors have dedicated flows and admins are seeded.
    """
    if data.role not in SELF_SERVICE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Accounts with role '{data.role.value}' cannot be created through this signup",
        )

    email = data.email.lower()
    await _ensure_email_free(db, email)
    user = await _create_user(db, data.name, email, data.password, data.role)

    logger.info("user_registered", user_id=user.id, role=user.role)
    return await _reload_user(db, user.id)


async def register_organizer(db: AsyncSession, data: OrganizerSignUpRequest) -> User:
    """Register an organizer together with their company and profile."""
    email = data.email.lower()
    await _ensure_email_free(db, email)
    user = await _create_user(db, data.name, email, data.password, Role.ORGANIZER, phone=data.phone)

    company = Company(
        name=data.company,
        description=data.description,
        website=data.website,
        contact_email=email,
        contact_phone=data.phone,
    )
    db.add(company)
    await db.flush()

    first_name, _, last_name = data.name.partition(" ")
    profile = OrganizerProfile(
        user_id=user.id,
        company_id=company.id,
        first_name=first_name,
        last_name=last_name or None,
        phone_number=data.phone,
        bio=data.description,
    )
    db.add(profile)
    await db.flush()

    logger.info("organizer_registered", user_id=user.id, company_id=company.id)
    return await _reload_user(db, user.id)


async def register_doctor(db: AsyncSession, data: DoctorSignUpRequest) -> User:
    email = data.email.lower()
    await _ensure_email_free(db, email)

    result = await db.execute(
        select(DoctorProfile).where(DoctorProfile.registration_number == data.reg_number)
    )
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="registration_number_exists")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Doctor with this registration number already exists",
        )

    user = await _create_user(db, data.name, email, data.password, Role.DOCTOR)
    db.add(
        DoctorProfile(
            user_id=user.id,
            registration_number=data.reg_number,
            specialization=data.specialization,
            qualification=data.qualification,
            hospital=data.hospital,
        )
    )
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        logger.warning("registration_failed", reason="registration_number_exists")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Doctor with this registration number already exists",
        )

    logger.info("doctor_registered", user_id=user.id)
    return await _reload_user(db, user.id)


async def authenticate_user(db: AsyncSession, data: SignInRequest) -> tuple[User, str]:
    """
    Authenticate user and return it with a fresh JWT.
    Raises 401 if credentials are invalid.
    """
    result = await db.execute(select(User).where(User.email == data.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(data.password, user.hashed_password):
        record_signin(False)
        logger.warning("login_failed", email=data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        record_signin(False)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    record_signin(True)
    logger.info("user_logged_in", user_id=user.id, role=user.role)
    return user, issue_token(user)


async def ensure_admin_account(db: AsyncSession) -> None:
    """Create the configured admin on startup if it does not exist yet."""
    settings = get_settings()
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return

    email = settings.ADMIN_EMAIL.lower()
    result = await db.execute(select(User).where(User.email == email))
    existing = result.scalar_one_or_none()
    if existing:
        if existing.role != Role.ADMIN.value:
            logger.error("admin_bootstrap_conflict", email=email, role=existing.role)
        return

    await _create_user(db, settings.ADMIN_NAME, email, settings.ADMIN_PASSWORD, Role.ADMIN)
    logger.info("admin_account_created", email=email)
