import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.config import settings
from nutritrack.core.db import get_db
from nutritrack.core.dependencies import get_user_repository, get_audit_service, get_optional_user
from nutritrack.core.errors import AppError, Conflict, Internal, Unauthenticated, ValidationFailure
from nutritrack.core.responses import success
from nutritrack.models.activity_log import ActivityType, ActivityStatus
from nutritrack.models.user import User, UserProfile, UserPreferences, AccountStatus
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.schemas.auth import UserRegister, UserLogin, AuthPayload, AuthUser, CurrentUser
from nutritrack.services.audit import AuditService
from nutritrack.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _auth_payload(user: User) -> dict:
    return AuthPayload(
        token=auth_service.create_access_token(user),
        user=AuthUser.model_validate(user),
    ).model_dump()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=dict)
async def register(
        data: UserRegister,
        db: AsyncSession = Depends(get_db),
        repo: UserRepository = Depends(get_user_repository),
        audit: AuditService = Depends(get_audit_service),
):
    """Create the account with default profile and preferences, then issue a token."""
    if len(data.password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationFailure(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    if await repo.exists_with_email_or_username(data.email, data.username):
        raise Conflict("User with this email or username already exists", error="User exists")

    try:
        user = User(
            username=data.username,
            email=data.email,
            password_hash=auth_service.hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            phone=data.phone,
            account_status=AccountStatus.active,
        )
        await repo.create_user(user, UserProfile(), UserPreferences())
        await audit.record(user.id, ActivityType.register, "User registered successfully")
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        await db.rollback()
        raise Conflict("User with this email or username already exists", error="User exists")
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Registration failed for %s", data.email)
        raise Internal("Registration failed")

    logger.info("Registered user %s", user.id)
    return success(_auth_payload(user), "User registered successfully")


@router.post("/login", response_model=dict)
async def login(
        data: UserLogin,
        db: AsyncSession = Depends(get_db),
        repo: UserRepository = Depends(get_user_repository),
        audit: AuditService = Depends(get_audit_service),
):
    user = await repo.get_by_email(data.email)
    if user is None:
        raise Unauthenticated("Invalid email or password", error="Invalid credentials")

    if not user.is_active:
        raise Unauthenticated("Your account has been suspended or deactivated", error="Account inactive")

    if not auth_service.verify_password(data.password, user.password_hash):
        await audit.record(user.id, ActivityType.login, "Failed login attempt", ActivityStatus.failed)
        await db.commit()
        raise Unauthenticated("Invalid email or password", error="Invalid credentials")

    try:
        await repo.touch_last_login(user)
        await audit.record(user.id, ActivityType.login, "User logged in successfully")
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Login bookkeeping failed for user %s", user.id)
        raise Internal("Login failed")

    return success(_auth_payload(user), "Login successful")


@router.post("/logout", response_model=dict)
async def logout(
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
        current_user: Optional[CurrentUser] = Depends(get_optional_user),
):
    """Tokens are stateless; logout only leaves an audit entry when the caller is known."""
    if current_user is not None:
        try:
            await audit.record(current_user.user_id, ActivityType.logout, "User logged out")
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Could not record logout for user %s", current_user.user_id)
            raise Internal("Logout failed")

    return success(message="Logout successful")
